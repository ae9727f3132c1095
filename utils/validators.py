"""
Input validation and sanitization functions.

This module ensures that caller input conforms to the expected name format
before it reaches the cache or the upstream API.
"""

from typing import Optional, Tuple

from utils.constants import (
    ERROR_EMPTY_NAME,
    ERROR_INVALID_NAME,
    ERROR_NAME_TOO_LONG,
    MAX_POKEMON_NAME_LENGTH,
    MIN_POKEMON_NAME_LENGTH,
    POKEMON_NAME_PATTERN,
)
from utils.errors import InputValidationError


def validate_pokemon_name(name: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a Pokemon name against length and regex constraints.

    Uses `POKEMON_NAME_PATTERN` (case-insensitive) to ensure the name only
    contains letters, digits and dashes.

    Args:
        name: Pokemon name to validate.

    Returns:
        Tuple containing (is_valid, error_message).
        If valid, error_message is None.
    """
    if not isinstance(name, str) or not name:
        return False, ERROR_EMPTY_NAME

    if len(name) < MIN_POKEMON_NAME_LENGTH:
        return False, ERROR_EMPTY_NAME

    if len(name) > MAX_POKEMON_NAME_LENGTH:
        return False, ERROR_NAME_TOO_LONG

    if not POKEMON_NAME_PATTERN.match(name):
        return False, ERROR_INVALID_NAME

    return True, None


def parse_pokemon_name(raw: Optional[str]) -> str:
    """
    Trim, validate and lowercase a caller-supplied name.

    Args:
        raw: Name as received from the caller.

    Returns:
        Canonical lowercase name.

    Raises:
        InputValidationError: If the name is missing or malformed.
    """
    name = raw.strip() if isinstance(raw, str) else raw
    is_valid, error = validate_pokemon_name(name)
    if not is_valid:
        raise InputValidationError(error)
    return name.lower()
