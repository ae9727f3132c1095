import logging
import os

from dotenv import load_dotenv

"""
Configuration settings for the Pokedex gateway.

This module loads environment variables, defines the upstream endpoint, cache
policy and server bindings, and validates the configuration so that a bad
deployment fails at startup rather than on the first request.
"""

load_dotenv()

logger = logging.getLogger("pokedex_gateway.config")


def _int_env(name: str, default: int) -> int:
    """
    Read an integer environment variable.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or empty.

    Returns:
        Parsed integer value.

    Raises:
        ValueError: If the variable is set but is not a valid integer.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"❌ {name} must be a valid integer (got {raw!r})!\n\n"
            f"Fix or remove it from your .env file. Default is {default}."
        )


# Upstream API
POKEAPI_URL = os.getenv("POKEAPI_URL", "https://pokeapi.co/api/v2").rstrip("/")
UPSTREAM_TIMEOUT = _int_env("UPSTREAM_TIMEOUT", 8)  # Seconds, per upstream call
CATALOG_PAGE_LIMIT = _int_env("CATALOG_PAGE_LIMIT", 2000)  # Covers every species

# Cache Configuration
CACHE_TTL = _int_env("CACHE_TTL", 600)  # Sliding expiration in seconds
CACHE_MAX_ENTRIES = _int_env("CACHE_MAX_ENTRIES", 120)
CACHE_CLEANUP_INTERVAL = _int_env("CACHE_CLEANUP_INTERVAL", 60)  # Seconds

# Server Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _int_env("PORT", 4000)
CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")  # Single origin or "*"

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None


def validate_settings():
    """
    Validate all configuration settings to catch errors at startup.

    Raises:
        ValueError: If any configuration value is invalid (e.g., non-positive
            timeouts, an empty cache, or an out-of-range port).
    """
    if not POKEAPI_URL.startswith(("http://", "https://")):
        raise ValueError("POKEAPI_URL must be an http(s) URL")

    if UPSTREAM_TIMEOUT <= 0:
        raise ValueError("UPSTREAM_TIMEOUT must be positive")

    if CATALOG_PAGE_LIMIT < 1:
        raise ValueError("CATALOG_PAGE_LIMIT must be at least 1")

    # Validate cache settings
    if CACHE_TTL <= 0:
        raise ValueError("CACHE_TTL must be positive")

    if CACHE_MAX_ENTRIES < 1:
        raise ValueError("CACHE_MAX_ENTRIES must be at least 1")

    if CACHE_CLEANUP_INTERVAL <= 0:
        raise ValueError("CACHE_CLEANUP_INTERVAL must be positive")

    if PORT < 1 or PORT > 65535:
        raise ValueError("PORT must be between 1 and 65535")

    if not CORS_ALLOW_ORIGIN.strip():
        raise ValueError("CORS_ALLOW_ORIGIN must be an origin or '*'")

    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        raise ValueError(f"LOG_LEVEL {LOG_LEVEL!r} is not a logging level")

    logger.info("✅ Configuration validation completed successfully")
