"""
Tile Resolver

Maps user-typed tile references (SKUs, names, loose keywords) onto catalog tiles.

Matching runs in strict tiers; the first tier that produces a tile wins and
ties inside a tier are broken by catalog order, not by relevance:
1. Exact SKU
2. Exact display name
3. Every input word appears in the tile's name + hint
4. An input word is a synonym of a keyword found in the tile's name + hint
"""

import logging
import re
from typing import Iterable, Optional

from tilevision_api.catalog import get_catalog
from tilevision_api.models import Tile

logger = logging.getLogger(__name__)

# Canonical material keyword -> alternate terms a user might type
SYNONYMS: dict[str, tuple[str, ...]] = {
    "marble": ("calacatta", "carrara"),
    "wood": ("oak", "porcelain"),
    "stone": ("terrazzo", "concrete", "granite"),
}

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    Lowercase, drop punctuation and collapse whitespace.

    >>> normalize_text("Calacatta, Gold!")
    'calacatta gold'
    """
    text = _NON_WORD.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def _searchable_text(tile: Tile) -> str:
    return normalize_text(f"{tile.name} {tile.hint}")


def find_tile(text: str, tiles: Optional[Iterable[Tile]] = None) -> Optional[Tile]:
    """
    Find the catalog tile a piece of user text refers to.

    Args:
        text: Free text as typed by the user or returned by the model
        tiles: Tiles to search (defaults to the loaded catalog)

    Returns:
        The first matching Tile, or None when nothing matches
    """
    candidates = list(get_catalog() if tiles is None else tiles)
    normalized = normalize_text(text)

    if not normalized:
        return None

    # 1. Exact SKU match (ids are normalized too, so "FLOOR-CALACATTA-GOLD" matches)
    for tile in candidates:
        if normalize_text(tile.id) == normalized:
            return tile

    # 2. Exact name match
    for tile in candidates:
        if normalize_text(tile.name) == normalized:
            return tile

    words = normalized.split(" ")
    searchable = [(tile, _searchable_text(tile)) for tile in candidates]

    # 3. Keyword subset match
    for tile, tile_text in searchable:
        if all(word in tile_text for word in words):
            return tile

    # 4. Synonym match
    for tile, tile_text in searchable:
        for word in words:
            for keyword, alternates in SYNONYMS.items():
                if word in alternates and keyword in tile_text:
                    logger.debug(f"Matched '{text}' to {tile.id} via synonym '{word}' -> '{keyword}'")
                    return tile

    return None
