"""
Request orchestration for the three public operations.

PokedexService answers lookup, matchup and catalog requests by reading
through the injected ResponseCache and falling back to the injected
PokeAPIClient on a miss. Concurrent misses for the same key are not
coalesced; each one reaches the upstream.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from config.settings import CACHE_CLEANUP_INTERVAL
from utils.api_clients import PokeAPIClient
from utils.api_models import (
    CatalogResponse,
    LookupResponse,
    MatchupResponse,
    NormalizedCreature,
    ServiceCacheStats,
)
from utils.cache import ResponseCache
from utils.constants import (
    CATALOG_CACHE_KEY,
    CREATURE_CACHE_PREFIX,
    SOURCE_CACHE,
    SOURCE_LIVE,
)
from utils.matchups import build_matchup_report
from utils.validators import parse_pokemon_name

logger = logging.getLogger("pokedex_gateway.service")


class PokedexService:
    """
    Read-through facade over the cache, the upstream client and the matchup engine.

    Attributes:
        cache: Response cache shared by every request handled by this service.
        client: Upstream client used on cache misses.
    """

    def __init__(
        self,
        cache: ResponseCache,
        client: PokeAPIClient,
        cleanup_interval: float = CACHE_CLEANUP_INTERVAL,
    ):
        self.cache = cache
        self.client = client
        self.cleanup_interval = cleanup_interval

        # Cache statistics (in-memory for performance)
        self.cache_hits = 0
        self.cache_misses = 0

        # Background cleanup task
        self._cleanup_task: Optional[asyncio.Task] = None
        self._is_closing = False

    async def start(self) -> None:
        """Start the background cache cleanup loop."""
        self._is_closing = False
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._cache_cleanup_loop())
            logger.info("Started cache cleanup background task")

    async def close(self) -> None:
        """Cancel background tasks and close the upstream client."""
        self._is_closing = True

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            logger.info("Cancelled cache cleanup task")

        await self.client.close()
        logger.info(
            f"Service closed (Cache stats - Hits: {self.cache_hits}, "
            f"Misses: {self.cache_misses})"
        )

    async def _cache_cleanup_loop(self) -> None:
        """Background task to periodically purge expired cache entries."""
        while not self._is_closing:
            await asyncio.sleep(self.cleanup_interval)
            try:
                removed = self.cache.purge_expired()
            except Exception as e:
                logger.error(f"Error in cache cleanup task: {e}", exc_info=True)
                continue

            if removed > 0:
                logger.debug(
                    "Cleaned expired cache entries",
                    extra={"count": removed},
                )

    def _read_cache(self, key: str):
        cached = self.cache.get(key)
        if cached is None:
            self.cache_misses += 1
        else:
            self.cache_hits += 1
        return cached

    async def _hydrate(self, name: str) -> Tuple[NormalizedCreature, str]:
        """
        Resolve an already-validated name through the cache.

        Returns:
            Tuple of (creature, source) where source is 'cache' or 'live'.
        """
        cache_key = f"{CREATURE_CACHE_PREFIX}{name}"
        cached = self._read_cache(cache_key)
        if cached is not None:
            return cached, SOURCE_CACHE

        creature = await self.client.fetch_pokemon(name)
        self.cache.set(cache_key, creature)
        return creature, SOURCE_LIVE

    async def get_pokemon(self, name: str) -> LookupResponse:
        """
        Look up a single Pokemon.

        Args:
            name: Caller-supplied name (case-insensitive).

        Returns:
            {"source": "cache" | "live", "data": NormalizedCreature}

        Raises:
            InputValidationError: If the name is malformed.
            NotFoundError: If the upstream has no such Pokemon.
            UpstreamError: If the upstream call fails.
            InternalError: If the upstream payload cannot be normalized.
        """
        canonical = parse_pokemon_name(name)
        data, source = await self._hydrate(canonical)
        logger.debug("Lookup served", extra={"pokemon": canonical, "source": source})
        return {"source": source, "data": data}

    async def get_catalog(self) -> CatalogResponse:
        """
        List every known Pokemon name, sorted and deduplicated.

        Raises:
            UpstreamError: If the upstream listing call fails.
            InternalError: If the listing payload cannot be parsed.
        """
        names: Optional[List[str]] = self._read_cache(CATALOG_CACHE_KEY)
        if names is None:
            names = await self.client.fetch_catalog()
            self.cache.set(CATALOG_CACHE_KEY, names)
        return {"data": names}

    async def get_matchups(
        self, name: str, opponent: Optional[str] = None
    ) -> MatchupResponse:
        """
        Build a matchup report for a Pokemon, optionally against an opponent.

        Both names are validated before any cache or upstream access.

        Args:
            name: Subject name.
            opponent: Optional opponent name.

        Returns:
            {"data": MatchupReport, "meta": {"subject": ..., "opponent": ...}}
        """
        subject_name = parse_pokemon_name(name)
        opponent_name = parse_pokemon_name(opponent) if opponent else None

        subject, _ = await self._hydrate(subject_name)

        opponent_meta = None
        opponent_types: List[str] = []
        if opponent_name:
            rival, rival_source = await self._hydrate(opponent_name)
            opponent_meta = {"name": rival["name"], "source": rival_source}
            opponent_types = rival["types"]

        report = build_matchup_report(subject["types"], opponent_types)
        return {
            "data": report,
            "meta": {"subject": subject["name"], "opponent": opponent_meta},
        }

    def get_cache_stats(self) -> ServiceCacheStats:
        """
        Get cache statistics.

        Returns:
            ServiceCacheStats combining store size/capacity/ttl with hit rates.
        """
        total_requests = self.cache_hits + self.cache_misses
        hit_rate = (self.cache_hits / total_requests * 100) if total_requests > 0 else 0

        return {
            **self.cache.stats(),
            "hits": self.cache_hits,
            "misses": self.cache_misses,
            "hit_rate": f"{hit_rate:.1f}%",
        }

    def clear_cache(self) -> None:
        """Clear all cached data and reset hit/miss counters."""
        self.cache.clear()
        self.cache_hits = 0
        self.cache_misses = 0
