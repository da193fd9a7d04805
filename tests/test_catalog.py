"""Tests for wildscapes/catalog.py - animal card catalog loading."""

import pytest
import yaml

from wildscapes.catalog import default_catalog, load_catalog, parse_catalog
from wildscapes.errors import CatalogError
from wildscapes.models import TerrainType


class TestDefaultCatalog:
    def test_bundled_catalog_loads(self):
        cards = default_catalog()
        assert len(cards) == 24
        assert len({card.id for card in cards}) == 24

    def test_cards_have_valid_habitats(self):
        for card in default_catalog():
            assert card.habitat
            assert card.points > 0
            assert card.emoji
            for cell in card.habitat:
                assert 0 <= cell.stack_level <= 2

    def test_camel_case_fields_parsed(self):
        fox = next(card for card in default_catalog() if card.id == "fox")
        assert fox.can_rotate is True
        assert fox.habitat[0].terrain == TerrainType.TREETOP
        assert fox.habitat[0].stack_level == 1
        assert fox.cubes_required == len(fox.habitat)


class TestLoadCatalog:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "cards.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "animals": [
                        {
                            "id": "mole",
                            "name": "Mole",
                            "species": "Talpa europaea",
                            "emoji": "🐀",
                            "points": 2,
                            "habitat": [{"terrain": "field", "stackLevel": 0}],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        cards = load_catalog(path)
        assert [card.id for card in cards] == ["mole"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path / "missing.yaml")
        assert "path" in exc_info.value.context

    def test_none_returns_default(self):
        assert load_catalog(None) == default_catalog()


class TestParseCatalog:
    def _card(self, card_id="mole", **overrides):
        data = {
            "id": card_id,
            "name": "Mole",
            "species": "Talpa europaea",
            "emoji": "🐀",
            "points": 2,
            "habitat": [{"terrain": "field"}],
        }
        data.update(overrides)
        return data

    def test_requires_animals_list(self):
        with pytest.raises(CatalogError):
            parse_catalog({"cards": []})
        with pytest.raises(CatalogError):
            parse_catalog(None)

    def test_rejects_duplicates(self):
        with pytest.raises(CatalogError, match="Duplicate"):
            parse_catalog({"animals": [self._card(), self._card()]})

    def test_rejects_empty_habitat(self):
        with pytest.raises(CatalogError, match="no habitat"):
            parse_catalog({"animals": [self._card(habitat=[])]})

    def test_rejects_bad_terrain(self):
        with pytest.raises(CatalogError, match="index 0"):
            parse_catalog({"animals": [self._card(habitat=[{"terrain": "lava"}])]})

    def test_rejects_bad_stack_level(self):
        with pytest.raises(CatalogError):
            parse_catalog(
                {"animals": [self._card(habitat=[{"terrain": "field", "stackLevel": 3}])]}
            )
