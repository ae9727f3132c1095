import copy
import os
import sys

import pytest

# Add project root to python path so we can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from utils.cache import ResponseCache  # noqa: E402

ARTWORK = "https://img.example/official/1.png"
HOME = "https://img.example/home/1.png"
DREAM = "https://img.example/dream/1.svg"
FRONT = "https://img.example/front/1.png"
SHINY = "https://img.example/shiny/1.png"
BACK = "https://img.example/back/1.png"

BULBASAUR = {
    "id": 1,
    "name": "bulbasaur",
    "order": 1,
    "height": 7,
    "weight": 69,
    "base_experience": 64,
    "types": [
        {"slot": 2, "type": {"name": "poison"}},
        {"slot": 1, "type": {"name": "grass"}},
    ],
    "abilities": [
        {"ability": {"name": "chlorophyll"}, "is_hidden": True, "slot": 3},
        {"ability": {"name": "overgrow"}, "is_hidden": False, "slot": 1},
    ],
    "stats": [
        {"base_stat": 45, "effort": 0, "stat": {"name": "hp"}},
        {"base_stat": 49, "effort": 0, "stat": {"name": "attack"}},
        {"base_stat": 49, "effort": 0, "stat": {"name": "defense"}},
        {"base_stat": 65, "effort": 1, "stat": {"name": "special-attack"}},
        {"base_stat": 65, "effort": 0, "stat": {"name": "special-defense"}},
        {"base_stat": 45, "effort": 0, "stat": {"name": "speed"}},
    ],
    "sprites": {
        "back_default": BACK,
        "back_female": None,
        "back_shiny": None,
        "back_shiny_female": None,
        "front_default": FRONT,
        "front_female": None,
        "front_shiny": SHINY,
        "front_shiny_female": None,
        "other": {
            "dream_world": {"front_default": DREAM, "front_female": None},
            "home": {
                "front_default": HOME,
                "front_female": None,
                "front_shiny": None,
                "front_shiny_female": None,
            },
            "official-artwork": {"front_default": ARTWORK, "front_shiny": None},
        },
        "versions": {"generation-i": {"red-blue": {"front_default": "ignored"}}},
    },
    "moves": [{"move": {"name": f"move-{i}"}} for i in range(12)],
}

BULBASAUR_SPECIES = {
    "id": 1,
    "name": "bulbasaur",
    "habitat": {"name": "grassland"},
    "color": {"name": "green"},
    "shape": {"name": "quadruped"},
    "genera": [
        {"genus": "たねポケモン", "language": {"name": "ja"}},
        {"genus": "Seed Pokémon", "language": {"name": "en"}},
    ],
    "flavor_text_entries": [
        {"flavor_text": "Graine sur le dos.", "language": {"name": "fr"}},
        {
            "flavor_text": "A strange seed was\nplanted on its\fback at birth.\r",
            "language": {"name": "en"},
        },
        {"flavor_text": "Second English entry.", "language": {"name": "en"}},
    ],
    "growth_rate": {"name": "medium-slow"},
    "capture_rate": 45,
    "egg_groups": [{"name": "monster"}, {"name": "plant"}],
    "is_legendary": False,
    "is_mythical": False,
}

SQUIRTLE = {
    "id": 7,
    "name": "squirtle",
    "order": 10,
    "height": 5,
    "weight": 90,
    "base_experience": 63,
    "types": [{"slot": 1, "type": {"name": "water"}}],
    "abilities": [{"ability": {"name": "torrent"}, "is_hidden": False, "slot": 1}],
    "stats": [
        {"base_stat": 44, "effort": 0, "stat": {"name": "hp"}},
        {"base_stat": 48, "effort": 0, "stat": {"name": "attack"}},
        {"base_stat": 65, "effort": 1, "stat": {"name": "defense"}},
        {"base_stat": 50, "effort": 0, "stat": {"name": "special-attack"}},
        {"base_stat": 64, "effort": 0, "stat": {"name": "special-defense"}},
        {"base_stat": 43, "effort": 0, "stat": {"name": "speed"}},
    ],
    "sprites": {"front_default": "https://img.example/front/7.png", "other": {}},
    "moves": [],
}

SQUIRTLE_SPECIES = {
    "id": 7,
    "name": "squirtle",
    "habitat": None,
    "color": {"name": "blue"},
    "shape": {"name": "upright"},
    "genera": [],
    "flavor_text_entries": [],
    "growth_rate": None,
    "capture_rate": 45,
    "egg_groups": [{"name": "monster"}, {"name": "water1"}],
    "is_legendary": False,
    "is_mythical": False,
}


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(max_entries=120, ttl=600, clock=clock)


@pytest.fixture
def bulbasaur_payloads():
    return copy.deepcopy(BULBASAUR), copy.deepcopy(BULBASAUR_SPECIES)


@pytest.fixture
def squirtle_payloads():
    return copy.deepcopy(SQUIRTLE), copy.deepcopy(SQUIRTLE_SPECIES)
