from conftest import ARTWORK, BACK, DREAM, FRONT, HOME, SHINY
from utils.normalize import build_sprite_list, format_pokemon, sanitize_flavor_text


class TestSpriteList:
    def test_preference_order(self, bulbasaur_payloads):
        pokemon, _ = bulbasaur_payloads
        assert build_sprite_list(pokemon["sprites"]) == [
            ARTWORK,
            HOME,
            DREAM,
            FRONT,
            SHINY,
            BACK,
        ]

    def test_deduplicates_and_drops_empty(self):
        sprites = {
            "front_default": "https://img.example/a.png",
            "front_shiny": "",
            "back_default": "https://img.example/a.png",
            "other": {
                "official-artwork": {"front_default": "https://img.example/a.png"},
                "home": None,
            },
        }
        assert build_sprite_list(sprites) == ["https://img.example/a.png"]

    def test_missing_sprites(self):
        assert build_sprite_list(None) == []
        assert build_sprite_list({}) == []


class TestFlavorText:
    def test_first_english_entry_is_flattened(self):
        entries = [
            {"flavor_text": "Bonjour", "language": {"name": "fr"}},
            {"flavor_text": "\fLine one\nline\rtwo\n", "language": {"name": "en"}},
            {"flavor_text": "Ignored", "language": {"name": "en"}},
        ]
        assert sanitize_flavor_text(entries) == "Line one line two"

    def test_no_english_entry(self):
        entries = [{"flavor_text": "Bonjour", "language": {"name": "fr"}}]
        assert sanitize_flavor_text(entries) is None
        assert sanitize_flavor_text(None) is None


class TestFormatPokemon:
    def test_merges_both_resources(self, bulbasaur_payloads):
        creature = format_pokemon(*bulbasaur_payloads)

        assert creature["id"] == 1
        assert creature["name"] == "bulbasaur"
        assert creature["height"] == 0.7
        assert creature["weight"] == 6.9
        assert creature["baseExperience"] == 64
        assert creature["types"] == ["grass", "poison"]
        assert creature["abilities"] == [
            {"name": "overgrow", "hidden": False},
            {"name": "chlorophyll", "hidden": True},
        ]
        assert len(creature["stats"]) == 6
        assert creature["stats"][3] == {
            "label": "special-attack",
            "base": 65,
            "effort": 1,
        }
        assert creature["movesSample"] == [f"move-{i}" for i in range(8)]
        assert creature["habitat"] == "grassland"
        assert creature["genus"] == "Seed Pokémon"
        assert creature["flavorText"] == "A strange seed was planted on its back at birth."
        assert creature["growthRate"] == "medium-slow"
        assert creature["captureRate"] == 45
        assert creature["eggGroups"] == ["monster", "plant"]
        assert creature["legendary"] is False
        assert creature["mythical"] is False

    def test_optional_descriptors_absent(self, squirtle_payloads):
        creature = format_pokemon(*squirtle_payloads)

        assert creature["habitat"] == "unknown"
        assert creature["genus"] is None
        assert creature["flavorText"] is None
        assert creature["growthRate"] is None
        assert creature["sprites"] == ["https://img.example/front/7.png"]
        assert creature["movesSample"] == []
