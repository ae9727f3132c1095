"""
This module contains static constant definitions used throughout the application,
including:
- Upstream client configuration (concurrency limits, connection pooling)
- Regular expressions for input validation
- Cache key formats
- Matchup classification labels
- User-facing messages (errors, status updates)
"""

import re

# Upstream Client Configuration
# Maximum number of concurrent upstream calls permitted across ALL requests.
# This keeps the gateway from being rate limited by PokeAPI.
GLOBAL_API_MAX_CONCURRENT = 10
API_STARTUP_VALIDATION_TIMEOUT = 10  # Seconds
CONNECTION_POOL_LIMIT = 100  # Total connections across all hosts
CONNECTION_POOL_LIMIT_PER_HOST = 30  # Max connections per host
CONNECTION_KEEPALIVE_TIMEOUT = 30  # Seconds to keep idle connections
USER_AGENT = "Pokedex-Gateway/1.0"

# Input Validation
MAX_POKEMON_NAME_LENGTH = 30
MIN_POKEMON_NAME_LENGTH = 1
POKEMON_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$", re.IGNORECASE)

# Cache Keys
CREATURE_CACHE_PREFIX = "creature:"
CATALOG_CACHE_KEY = "catalog"

# Response Sources
SOURCE_CACHE = "cache"
SOURCE_LIVE = "live"

# Normalization
MOVES_SAMPLE_SIZE = 8
UNKNOWN_DESCRIPTOR = "unknown"
ENGLISH_LANGUAGE = "en"

# Matchup Summary
BEST_COUNTERS_LIMIT = 3
RESIST_HIGHLIGHTS_LIMIT = 5
MULTIPLIER_PRECISION = 2

# Verdict Labels
VERDICT_CRUSHING = "Crushing advantage"
VERDICT_FAVORABLE = "Favorable matchup"
VERDICT_CRITICAL = "Critical threat"
VERDICT_DANGER = "Danger zone"
VERDICT_BALANCED = "Balanced showdown"

# Error Messages
ERROR_POKEMON_NOT_FOUND = "Pokémon not found"
ERROR_INVALID_NAME = "Use alphanumeric characters or dashes only"
ERROR_EMPTY_NAME = "Pokémon name cannot be empty"
ERROR_NAME_TOO_LONG = (
    f"Pokémon name is too long (max {MAX_POKEMON_NAME_LENGTH} characters)"
)
ERROR_VENDOR_PREFIX = "Vendor error"
ERROR_UNEXPECTED_UPSTREAM = "Unexpected error while talking to PokeAPI"
ERROR_INTERNAL = "Something went wrong"
ERROR_ROUTE_NOT_FOUND = "Not found"

# HTTP response headers
CORS_ALLOW_METHODS = "GET, HEAD, OPTIONS"
CORS_MAX_AGE = "600"  # Seconds a browser may cache a preflight answer
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'self'",
}
