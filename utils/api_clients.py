"""
API Client module for fetching creature data from PokeAPI.

This module aggregates the /pokemon and /pokemon-species resources into a
single normalized record and fetches the species catalog. It owns the
pooled aiohttp session, bounds upstream concurrency with a semaphore, and
translates every upstream failure into the gateway's error taxonomy.
Each upstream call is attempted exactly once.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from config.settings import CATALOG_PAGE_LIMIT, POKEAPI_URL, UPSTREAM_TIMEOUT
from utils.api_models import NormalizedCreature
from utils.constants import (
    API_STARTUP_VALIDATION_TIMEOUT,
    CONNECTION_KEEPALIVE_TIMEOUT,
    CONNECTION_POOL_LIMIT,
    CONNECTION_POOL_LIMIT_PER_HOST,
    ERROR_POKEMON_NOT_FOUND,
    ERROR_UNEXPECTED_UPSTREAM,
    ERROR_VENDOR_PREFIX,
    GLOBAL_API_MAX_CONCURRENT,
    USER_AGENT,
)
from utils.errors import InternalError, NotFoundError, UpstreamError
from utils.normalize import format_pokemon

logger = logging.getLogger("pokedex_gateway.api")


class PokeAPIClient:
    """
    Client for fetching and normalizing Pokemon data from PokeAPI.

    Key Features:
    - **Connection Pooling**: Uses `aiohttp.TCPConnector` to reuse connections.
    - **Concurrent Aggregation**: Fetches both resources of a record at once
      and fails as a unit if either call fails.
    - **Global Rate Limiting**: Bounds simultaneous upstream calls via a semaphore.
    - **Error Translation**: Maps HTTP/transport failures to NotFoundError,
      UpstreamError or InternalError.
    """

    def __init__(
        self,
        base_url: str = POKEAPI_URL,
        timeout: float = UPSTREAM_TIMEOUT,
        catalog_limit: int = CATALOG_PAGE_LIMIT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.catalog_limit = catalog_limit
        self.session: Optional[aiohttp.ClientSession] = None

        # Session creation lock to prevent race conditions during lazy loading
        self._session_lock = asyncio.Lock()

        # Global rate limiter (across all requests)
        self._global_rate_limiter = asyncio.Semaphore(GLOBAL_API_MAX_CONCURRENT)

        self.upstream_calls = 0
        self.upstream_failures = 0

    async def get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session with connection pooling configuration.

        The session-wide `total` timeout applies to each individual upstream
        call, since every call is a single GET.

        Returns:
            Active aiohttp ClientSession.
        """
        async with self._session_lock:
            if self.session is None or self.session.closed:
                timeout = aiohttp.ClientTimeout(total=self.timeout)

                connector = aiohttp.TCPConnector(
                    limit=CONNECTION_POOL_LIMIT,
                    limit_per_host=CONNECTION_POOL_LIMIT_PER_HOST,
                    ttl_dns_cache=300,  # DNS cache TTL (5 minutes)
                    keepalive_timeout=CONNECTION_KEEPALIVE_TIMEOUT,
                    force_close=False,
                )

                self.session = aiohttp.ClientSession(
                    timeout=timeout,
                    connector=connector,
                    headers={"User-Agent": USER_AGENT},
                )

                logger.info(
                    "Created aiohttp session with connection pooling",
                    extra={
                        "total_limit": CONNECTION_POOL_LIMIT,
                        "per_host_limit": CONNECTION_POOL_LIMIT_PER_HOST,
                        "timeout_seconds": self.timeout,
                    },
                )

        return self.session

    async def validate_api_connectivity(self) -> Dict[str, bool]:
        """
        Validate connectivity to PokeAPI on startup.

        Never raises; the outcome is logged and returned.

        Returns:
            Dictionary mapping 'pokeapi' to its reachability.
        """
        results = {"pokeapi": False}

        try:
            session = await self.get_session()
            test_url = f"{self.base_url}/pokemon/1"

            async with asyncio.timeout(API_STARTUP_VALIDATION_TIMEOUT):
                async with session.get(test_url) as resp:
                    if resp.status == 200:
                        results["pokeapi"] = True
                        logger.info("✅ PokeAPI is reachable")
                    else:
                        logger.warning(f"⚠️ PokeAPI returned status {resp.status}")
        except asyncio.TimeoutError:
            logger.error(
                "❌ PokeAPI connection timed out",
                extra={"timeout_seconds": API_STARTUP_VALIDATION_TIMEOUT},
            )
        except aiohttp.ClientError as e:
            logger.error(f"❌ PokeAPI validation failed: {e}")

        if not results["pokeapi"]:
            logger.warning(
                "⚠️ PokeAPI is unreachable. "
                "Gateway will continue but lookups will fail until it recovers."
            )

        return results

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()
            logger.info(
                f"API client session closed (Upstream calls: {self.upstream_calls}, "
                f"Failures: {self.upstream_failures})"
            )

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Perform one GET against the upstream and decode its JSON body.

        Args:
            path: Path relative to the base URL (e.g., '/pokemon/pikachu').
            params: Optional query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            aiohttp.ClientResponseError: On non-2xx responses.
            aiohttp.ClientError: On connection failures.
            asyncio.TimeoutError: When the call exceeds the timeout.
            UpstreamError: When the body is empty, not UTF-8 or not valid JSON.
        """
        session = await self.get_session()
        url = f"{self.base_url}{path}"
        logger.debug(f"Fetching {url}")

        self.upstream_calls += 1
        async with self._global_rate_limiter:
            async with session.get(url, params=params) as resp:
                resp.raise_for_status()
                try:
                    payload = await resp.json()
                except ValueError as e:
                    # Covers both JSONDecodeError and UnicodeDecodeError
                    self.upstream_failures += 1
                    raise UpstreamError(
                        f"{ERROR_VENDOR_PREFIX}: malformed JSON from {path}"
                    ) from e

        if payload is None:
            self.upstream_failures += 1
            raise UpstreamError(f"{ERROR_VENDOR_PREFIX}: empty body from {path}")
        return payload

    async def _gather_all(self, *coros) -> List[Any]:
        """
        Run coroutines concurrently and return all results.

        If any of them fails, the others are cancelled before the error
        propagates, so no partial result survives.
        """
        tasks = [asyncio.ensure_future(coro) for coro in coros]
        try:
            return await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    def _vendor_error(self, error: Exception) -> UpstreamError:
        """Build an UpstreamError describing a transport/protocol failure."""
        self.upstream_failures += 1

        if isinstance(error, aiohttp.ClientResponseError):
            detail = f"upstream responded {error.status} {error.message}".strip()
        elif isinstance(error, asyncio.TimeoutError):
            detail = f"timeout of {self.timeout}s exceeded"
        else:
            detail = str(error) or error.__class__.__name__

        logger.warning(
            "Upstream call failed",
            extra={"error": detail, "error_type": error.__class__.__name__},
        )
        return UpstreamError(f"{ERROR_VENDOR_PREFIX}: {detail}")

    async def fetch_pokemon(self, name: str) -> NormalizedCreature:
        """
        Fetch and merge the /pokemon and /pokemon-species records for `name`.

        Both resources are requested concurrently; the operation succeeds only
        if both do.

        Args:
            name: Pokemon name or id (case-insensitive).

        Returns:
            NormalizedCreature for the requested Pokemon.

        Raises:
            NotFoundError: If the upstream answers 404 for either resource.
            UpstreamError: On timeouts, connection errors or other non-2xx.
            InternalError: If the payloads cannot be merged.
        """
        lower_name = name.lower()

        try:
            pokemon_payload, species_payload = await self._gather_all(
                self._get_json(f"/pokemon/{lower_name}"),
                self._get_json(f"/pokemon-species/{lower_name}"),
            )
        except aiohttp.ClientResponseError as e:
            if e.status == 404:
                logger.debug(f"Pokemon {lower_name} not found in PokeAPI")
                raise NotFoundError(ERROR_POKEMON_NOT_FOUND) from e
            raise self._vendor_error(e) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise self._vendor_error(e) from e

        try:
            creature = format_pokemon(pokemon_payload, species_payload)
        except Exception as e:
            logger.error(
                "Failed to normalize PokeAPI payload",
                extra={"pokemon": lower_name},
                exc_info=True,
            )
            raise InternalError(ERROR_UNEXPECTED_UPSTREAM) from e

        logger.info(
            "Fetched Pokemon",
            extra={"pokemon": creature["name"], "types": creature["types"]},
        )
        return creature

    async def fetch_catalog(self) -> List[str]:
        """
        Fetch the names of every known species.

        Requests a single page large enough to cover the whole species list.

        Returns:
            Sorted, deduplicated list of species names.

        Raises:
            UpstreamError: On any transport/protocol failure (including 404).
            InternalError: If the listing payload has an unexpected shape.
        """
        try:
            payload = await self._get_json(
                "/pokemon-species", params={"limit": str(self.catalog_limit)}
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise self._vendor_error(e) from e

        try:
            names = sorted({entry["name"] for entry in payload["results"]})
        except Exception as e:
            logger.error("Failed to parse PokeAPI species listing", exc_info=True)
            raise InternalError(ERROR_UNEXPECTED_UPSTREAM) from e

        logger.info(f"Fetched catalog of {len(names)} Pokemon names")
        return names
