"""
Normalization of raw PokeAPI payloads into a NormalizedCreature.

These functions are pure: they take the decoded /pokemon and /pokemon-species
JSON bodies and return plain dictionaries. Any KeyError/TypeError raised here
means the upstream payload did not have the expected shape; the API client
maps those to InternalError.
"""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from utils.api_models import Ability, NormalizedCreature, StatEntry
from utils.constants import ENGLISH_LANGUAGE, MOVES_SAMPLE_SIZE, UNKNOWN_DESCRIPTOR

# (group under sprites["other"], field); a group of None means a top-level field
SPRITE_PREFERENCE: Tuple[Tuple[Optional[str], str], ...] = (
    ("official-artwork", "front_default"),
    ("official-artwork", "front_shiny"),
    ("home", "front_default"),
    ("home", "front_shiny"),
    ("home", "front_female"),
    ("home", "front_shiny_female"),
    ("dream_world", "front_default"),
    ("dream_world", "front_female"),
    (None, "front_default"),
    (None, "front_shiny"),
    (None, "front_female"),
    (None, "front_shiny_female"),
    (None, "back_default"),
    (None, "back_shiny"),
    (None, "back_female"),
    (None, "back_shiny_female"),
)

_FLAVOR_WHITESPACE = re.compile(r"[\f\n\r]")


def _is_english(entry: Dict[str, Any]) -> bool:
    return (entry.get("language") or {}).get("name") == ENGLISH_LANGUAGE


def sanitize_flavor_text(entries: Optional[Sequence[Dict[str, Any]]]) -> Optional[str]:
    """
    Pick the first English flavor text entry and flatten its line breaks.

    Each form-feed, newline and carriage return becomes a single space and
    the result is trimmed.

    Args:
        entries: The species `flavor_text_entries` list.

    Returns:
        Cleaned text, or None when no English entry exists.
    """
    for entry in entries or []:
        if _is_english(entry):
            return _FLAVOR_WHITESPACE.sub(" ", entry["flavor_text"]).strip()
    return None


def find_english_genus(genera: Optional[Sequence[Dict[str, Any]]]) -> Optional[str]:
    for entry in genera or []:
        if _is_english(entry):
            return entry.get("genus")
    return None


def build_sprite_list(sprites: Optional[Dict[str, Any]]) -> List[str]:
    """
    Flatten the sprite tree into an ordered, deduplicated list of URLs.

    Walks SPRITE_PREFERENCE, skipping missing groups and null/empty URLs, and
    keeps the first occurrence of each URL.

    Args:
        sprites: The `sprites` object of a /pokemon payload (may be None).

    Returns:
        List of sprite URLs in preference order.
    """
    sprites = sprites or {}
    other = sprites.get("other") or {}

    urls: List[str] = []
    seen = set()
    for group, field in SPRITE_PREFERENCE:
        source = sprites if group is None else (other.get(group) or {})
        url = source.get(field)
        if not url or url in seen:
            continue
        seen.add(url)
        urls.append(url)
    return urls


def _name_or_unknown(resource: Optional[Dict[str, Any]]) -> str:
    return (resource or {}).get("name") or UNKNOWN_DESCRIPTOR


def format_pokemon(
    pokemon: Dict[str, Any], species: Dict[str, Any]
) -> NormalizedCreature:
    """
    Merge a /pokemon payload and its /pokemon-species payload.

    Args:
        pokemon: Decoded /pokemon/{name} body.
        species: Decoded /pokemon-species/{name} body.

    Returns:
        NormalizedCreature dictionary.
    """
    types = [
        entry["type"]["name"]
        for entry in sorted(pokemon["types"], key=lambda entry: entry["slot"])
    ]

    abilities: List[Ability] = [
        {"name": entry["ability"]["name"], "hidden": bool(entry["is_hidden"])}
        for entry in sorted(
            pokemon["abilities"], key=lambda entry: bool(entry["is_hidden"])
        )
    ]

    stats: List[StatEntry] = [
        {
            "label": entry["stat"]["name"],
            "base": entry["base_stat"],
            "effort": entry["effort"],
        }
        for entry in pokemon["stats"]
    ]

    growth_rate = species.get("growth_rate")

    return {
        "id": pokemon["id"],
        "name": pokemon["name"],
        "order": pokemon["order"],
        "height": pokemon["height"] / 10,
        "weight": pokemon["weight"] / 10,
        "baseExperience": pokemon.get("base_experience"),
        "types": types,
        "abilities": abilities,
        "stats": stats,
        "sprites": build_sprite_list(pokemon.get("sprites")),
        "movesSample": [
            entry["move"]["name"]
            for entry in (pokemon.get("moves") or [])[:MOVES_SAMPLE_SIZE]
        ],
        "habitat": _name_or_unknown(species.get("habitat")),
        "color": _name_or_unknown(species.get("color")),
        "shape": _name_or_unknown(species.get("shape")),
        "genus": find_english_genus(species.get("genera")),
        "flavorText": sanitize_flavor_text(species.get("flavor_text_entries")),
        "growthRate": growth_rate.get("name") if growth_rate else None,
        "captureRate": species.get("capture_rate"),
        "eggGroups": [group["name"] for group in species.get("egg_groups") or []],
        "legendary": bool(species.get("is_legendary")),
        "mythical": bool(species.get("is_mythical")),
    }
