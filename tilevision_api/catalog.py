"""
Tile Catalog Index.

Loads the static tile catalog once at startup and provides read-only access to it.

The catalog file uses the same record layout as the frontend placeholder images:
    {"id": "floor-calacatta-gold", "description": "Calacatta Gold",
     "imageHint": "white marble", "imageUrl": "https://..."}

Category is encoded in the id prefix (floor-*, wall-*).
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from tilevision_api.config import config
from tilevision_api.models import Tile

logger = logging.getLogger(__name__)


class UnknownTileError(LookupError):
    """Raised when a tile id is not in the catalog."""

    def __init__(self, tile_id: str):
        super().__init__(f"Tile not found: {tile_id}")
        self.tile_id = tile_id


def parse_tile_record(record: dict) -> Tile:
    """
    Convert a raw catalog record into a Tile.

    Args:
        record: Dict with 'id', 'description', 'imageHint' and 'imageUrl' keys

    Returns:
        The Tile model

    Raises:
        ValueError: If the record has no id or no display name
    """
    tile_id = (record.get("id") or "").strip()
    name = (record.get("description") or record.get("name") or "").strip()

    if not tile_id:
        raise ValueError(f"Catalog record without id: {record}")
    if not name:
        raise ValueError(f"Catalog record without name: {tile_id}")

    return Tile(
        id=tile_id,
        name=name,
        hint=record.get("imageHint") or record.get("hint") or "",
        image_url=record.get("imageUrl") or record.get("image_url") or "",
    )


class TileCatalog:
    """
    Immutable, ordered collection of catalog tiles.

    Iteration order is the file order; the resolver relies on it to break ties.
    """

    def __init__(self, tiles: Iterable[Tile]):
        self._tiles: tuple[Tile, ...] = tuple(tiles)
        self._by_id: dict[str, Tile] = {}

        for tile in self._tiles:
            if tile.id in self._by_id:
                raise ValueError(f"Duplicate tile id in catalog: {tile.id}")
            self._by_id[tile.id] = tile

    @classmethod
    def from_file(cls, path: Path) -> "TileCatalog":
        """Load a catalog from a JSON file (a list, or {"placeholderImages": [...]})."""
        if not path.exists():
            raise FileNotFoundError(f"Tile catalog not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        records = data.get("placeholderImages", []) if isinstance(data, dict) else data
        catalog = cls(parse_tile_record(record) for record in records)
        logger.info(f"Loaded {len(catalog)} tiles from {path}")
        return catalog

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._by_id

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return self._tiles

    def get(self, tile_id: str) -> Optional[Tile]:
        """Get a single tile by its SKU."""
        return self._by_id.get(tile_id)

    def require(self, tile_id: str) -> Tile:
        """Get a tile by its SKU, raising UnknownTileError if it does not exist."""
        tile = self._by_id.get(tile_id)
        if tile is None:
            raise UnknownTileError(tile_id)
        return tile

    def by_category(self, category: str) -> list[Tile]:
        """Tiles whose id prefix matches the category ('floor' or 'wall')."""
        return [tile for tile in self._tiles if tile.category == category]

    def listing(self) -> str:
        """Catalog listing handed to the language model, one tile per line."""
        return "\n".join(f"- {tile.name} (SKU: {tile.id})" for tile in self._tiles)


_catalog: Optional[TileCatalog] = None


def get_catalog() -> TileCatalog:
    """Get the process-wide tile catalog, loading it on first use."""
    global _catalog
    if _catalog is None:
        _catalog = TileCatalog.from_file(config.CATALOG_PATH)
    return _catalog
