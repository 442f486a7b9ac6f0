"""
Unit tests for the Tile Resolver.

Covers text normalization and each matching tier, against both the bundled
catalog and small hand-built catalogs where tier ordering matters.
"""

import pytest

from tilevision_api.matching import SYNONYMS, find_tile, normalize_text
from tilevision_api.models import Tile


class TestNormalizeText:
    """Tests for the normalize_text function."""

    def test_strips_punctuation_and_lowercases(self):
        assert normalize_text("Calacatta, Gold!") == "calacatta gold"

    def test_collapses_whitespace(self):
        assert normalize_text("  White \t  Subway\n") == "white subway"

    def test_removes_hyphens(self):
        assert normalize_text("floor-calacatta-gold") == "floorcalacattagold"

    def test_keeps_underscores_and_digits(self):
        """Underscores and digits are word characters."""
        assert normalize_text("Tile_42 (matte)") == "tile_42 matte"

    @pytest.mark.parametrize("text", ["Calacatta, Gold!", "  A  b ", "", "!!!", "Ünïcode Tïle"])
    def test_idempotent(self, text):
        once = normalize_text(text)
        assert normalize_text(once) == once

    def test_punctuation_only_is_empty(self):
        assert normalize_text("?!,.") == ""


class TestExactMatches:
    """Tier 1 (SKU) and tier 2 (name) against the bundled catalog."""

    def test_every_sku_resolves_to_itself(self, catalog):
        for tile in catalog:
            assert find_tile(tile.id, catalog) == tile

    def test_sku_match_ignores_case(self, catalog):
        for tile in catalog:
            assert find_tile(tile.id.upper(), catalog) == tile

    def test_every_name_resolves_to_itself(self, catalog):
        for tile in catalog:
            assert find_tile(tile.name, catalog) == tile

    def test_name_match_ignores_case_and_punctuation(self, catalog):
        assert find_tile("CALACATTA, GOLD", catalog).id == "floor-calacatta-gold"
        assert find_tile("  carrara. ", catalog).id == "wall-carrara"

    def test_sku_tier_wins_over_name_tier(self):
        tiles = [
            Tile(id="floor-plain", name="wallonyx", hint=""),
            Tile(id="wall-onyx", name="Onyx", hint=""),
        ]
        # both normalize to "wallonyx"; the SKU tier is tried on every tile first
        assert find_tile("WALL-ONYX", tiles).id == "wall-onyx"
        assert find_tile("wallonyx!", tiles).id == "wall-onyx"


class TestKeywordMatch:
    """Tier 3: every input word appears in name + hint."""

    def test_single_keyword_in_name(self, catalog):
        assert find_tile("zellige", catalog).id == "wall-green-zellige"

    def test_keyword_in_hint(self, catalog):
        assert find_tile("brick", catalog).id == "wall-exposed-brick"

    def test_word_order_does_not_matter(self, catalog):
        assert find_tile("gold calacatta", catalog).id == "floor-calacatta-gold"

    def test_words_may_span_name_and_hint(self, catalog):
        assert find_tile("subway glossy", catalog).id == "wall-white-subway"

    def test_substring_words_match(self, catalog):
        assert find_tile("terra", catalog).id == "floor-speckled-terrazzo"

    def test_first_tile_in_catalog_order_wins(self, catalog):
        """Both Calacatta Gold and Carrara are 'white marble'; the earlier tile wins."""
        assert find_tile("white marble", catalog).id == "floor-calacatta-gold"

    def test_all_words_must_match(self, catalog):
        assert find_tile("green brick", catalog) is None


class TestSynonymMatch:
    """Tier 4: synonym expansion."""

    def test_synonym_table(self):
        assert SYNONYMS["marble"] == ("calacatta", "carrara")
        assert SYNONYMS["wood"] == ("oak", "porcelain")
        assert SYNONYMS["stone"] == ("terrazzo", "concrete", "granite")

    def test_oak_resolves_to_wood_tile(self, catalog):
        tile = find_tile("oak", catalog)
        assert tile.id == "floor-natural-plank"
        assert "wood" in normalize_text(f"{tile.name} {tile.hint}")

    def test_granite_resolves_to_first_stone_tile(self, catalog):
        assert find_tile("granite", catalog).id == "floor-speckled-terrazzo"

    def test_keyword_tier_is_tried_on_all_tiles_before_synonyms(self):
        tiles = [
            Tile(id="floor-pine", name="Pine", hint="wood"),
            Tile(id="floor-oak", name="Smoked Oak", hint="wide board"),
        ]
        assert find_tile("oak", tiles).id == "floor-oak"

    def test_synonym_needs_canonical_keyword_in_tile(self):
        tiles = [Tile(id="wall-glass", name="Glass Mosaic", hint="blue glass")]
        assert find_tile("oak", tiles) is None

    def test_any_word_can_trigger_synonym(self):
        tiles = [Tile(id="floor-wood", name="Rustic Plank", hint="reclaimed wood")]
        assert find_tile("smoked oak", tiles).id == "floor-wood"


class TestNotFound:
    """Inputs that must not resolve."""

    def test_empty_input(self, catalog):
        assert find_tile("", catalog) is None

    def test_whitespace_and_punctuation_input(self, catalog):
        assert find_tile("   ", catalog) is None
        assert find_tile("?!", catalog) is None

    def test_unknown_text(self, catalog):
        assert find_tile("Unobtainium Onyx", catalog) is None

    def test_empty_catalog(self):
        assert find_tile("carrara", []) is None

    def test_defaults_to_loaded_catalog(self):
        assert find_tile("Carrara").id == "wall-carrara"
