"""
Unit tests for the Tile Catalog Index.
"""

import json

import pytest

from tilevision_api.catalog import TileCatalog, UnknownTileError, get_catalog, parse_tile_record
from tilevision_api.models import Tile


class TestParseTileRecord:
    """Tests for the parse_tile_record function."""

    def test_maps_placeholder_fields(self):
        tile = parse_tile_record({
            "id": "floor-calacatta-gold",
            "description": "Calacatta Gold",
            "imageHint": "white marble",
            "imageUrl": "https://example.com/calacatta.jpg",
        })

        assert tile.id == "floor-calacatta-gold"
        assert tile.name == "Calacatta Gold"
        assert tile.hint == "white marble"
        assert tile.image_url == "https://example.com/calacatta.jpg"

    def test_missing_hint_defaults_to_empty(self):
        tile = parse_tile_record({"id": "wall-plain", "description": "Plain"})
        assert tile.hint == ""
        assert tile.image_url == ""

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            parse_tile_record({"description": "No Id"})

    def test_missing_name_rejected(self):
        with pytest.raises(ValueError):
            parse_tile_record({"id": "floor-nameless"})


class TestTileCategory:
    """Category is derived from the id prefix."""

    def test_floor_prefix(self):
        assert Tile(id="floor-x", name="X").category == "floor"

    def test_wall_prefix(self):
        assert Tile(id="wall-x", name="X").category == "wall"

    def test_other_prefix(self):
        assert Tile(id="ceiling-x", name="X").category is None

    def test_display_sku(self):
        assert Tile(id="floor-calacatta-gold", name="X").display_sku == "SKU-FLOOR-CALACATTA-GOLD"

    def test_tiles_are_immutable(self):
        tile = Tile(id="floor-x", name="X")
        with pytest.raises(Exception):
            tile.name = "Y"


class TestTileCatalog:
    """Tests for TileCatalog."""

    def test_bundled_catalog_loads(self, catalog):
        assert len(catalog) == 10
        assert "floor-calacatta-gold" in catalog
        assert "wall-carrara" in catalog

    def test_preserves_file_order(self, catalog):
        ids = [tile.id for tile in catalog]
        assert ids[0] == "floor-calacatta-gold"
        assert ids[-1] == "wall-raw-concrete"

    def test_by_category(self, catalog):
        floors = catalog.by_category("floor")
        walls = catalog.by_category("wall")

        assert len(floors) == 5
        assert len(walls) == 5
        assert all(tile.id.startswith("floor-") for tile in floors)
        assert all(tile.id.startswith("wall-") for tile in walls)
        assert catalog.by_category("ceiling") == []

    def test_get_and_require(self, catalog):
        assert catalog.get("wall-carrara").name == "Carrara"
        assert catalog.get("wall-unknown") is None

        with pytest.raises(UnknownTileError) as exc_info:
            catalog.require("wall-unknown")
        assert exc_info.value.tile_id == "wall-unknown"

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            TileCatalog([Tile(id="floor-a", name="A"), Tile(id="floor-a", name="B")])

    def test_listing_format(self):
        catalog = TileCatalog([
            Tile(id="floor-a", name="Alpha"),
            Tile(id="wall-b", name="Beta"),
        ])
        assert catalog.listing() == "- Alpha (SKU: floor-a)\n- Beta (SKU: wall-b)"

    def test_from_plain_list_file(self, tmp_path):
        path = tmp_path / "tiles.json"
        path.write_text(json.dumps([{"id": "floor-a", "description": "Alpha"}]))

        catalog = TileCatalog.from_file(path)

        assert [tile.id for tile in catalog] == ["floor-a"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TileCatalog.from_file(tmp_path / "missing.json")

    def test_get_catalog_is_cached(self):
        assert get_catalog() is get_catalog()
