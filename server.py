"""
Main entry point for the Pokedex gateway.

This module wires the cache, upstream client and service into an aiohttp web
application and serves it. It includes:
- Logging setup and configuration validation.
- Middleware for access logging, CORS and security headers, and for
  rendering every failure as the standard error envelope.
- Startup/cleanup hooks that own the service's background task and the
  upstream session.
"""

import asyncio
import logging
import sys
import time
from typing import Optional

from aiohttp import web

from config.settings import (
    CORS_ALLOW_ORIGIN,
    HOST,
    LOG_FILE,
    LOG_LEVEL,
    PORT,
    validate_settings,
)
from routes.pokemon import SERVICE_KEY, routes
from utils.api_clients import PokeAPIClient
from utils.cache import ResponseCache
from utils.constants import (
    CORS_ALLOW_METHODS,
    CORS_MAX_AGE,
    ERROR_INTERNAL,
    ERROR_ROUTE_NOT_FOUND,
    SECURITY_HEADERS,
)
from utils.errors import InternalError, PokedexError
from utils.pokedex_service import PokedexService

logger = logging.getLogger("pokedex_gateway")

CORS_ORIGIN_KEY = web.AppKey("cors_allow_origin", str)


def setup_logging() -> None:
    """Configure root logging from LOG_LEVEL and the optional LOG_FILE."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE, encoding="utf-8"))

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.getLogger().setLevel(level)
    logger.setLevel(level)


def _error_response(message: str, status: int) -> web.Response:
    return web.json_response(
        {"error": {"message": message, "status": status}}, status=status
    )


@web.middleware
async def access_log_middleware(request: web.Request, handler) -> web.StreamResponse:
    started = time.monotonic()
    response = await handler(request)
    logger.info(
        f"{request.method} {request.path_qs} {response.status}",
        extra={"duration_ms": round((time.monotonic() - started) * 1000, 1)},
    )
    return response


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """
    Render every failure as {"error": {"message", "status"}}.

    Internal failures are logged with full context; callers only ever see
    a generic message for them.
    """
    try:
        return await handler(request)
    except PokedexError as e:
        if isinstance(e, InternalError):
            logger.error(
                f"Internal error handling {request.path_qs}",
                exc_info=e,
            )
        return web.json_response(e.to_envelope(), status=e.status)
    except web.HTTPException as e:
        if e.status == 404:
            return _error_response(ERROR_ROUTE_NOT_FOUND, 404)
        return _error_response(e.reason, e.status)
    except Exception as e:
        logger.error(f"Unexpected error handling {request.path_qs}", exc_info=e)
        return _error_response(ERROR_INTERNAL, 500)


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """
    Add CORS and browser security headers to every response.

    Preflight requests are answered here with 204 and never reach a handler.
    """
    allow_origin = request.app[CORS_ORIGIN_KEY]

    is_preflight = (
        request.method == "OPTIONS"
        and "Access-Control-Request-Method" in request.headers
    )
    if is_preflight:
        response = web.Response(status=204)
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Max-Age"] = CORS_MAX_AGE
        requested_headers = request.headers.get("Access-Control-Request-Headers")
        if requested_headers:
            response.headers["Access-Control-Allow-Headers"] = requested_headers
    else:
        response = await handler(request)

    response.headers["Access-Control-Allow-Origin"] = allow_origin
    if allow_origin != "*":
        response.headers["Vary"] = "Origin"
    response.headers.update(SECURITY_HEADERS)
    return response


async def _on_startup(app: web.Application) -> None:
    await app[SERVICE_KEY].start()


async def _on_cleanup(app: web.Application) -> None:
    await app[SERVICE_KEY].close()


def create_app(
    service: Optional[PokedexService] = None,
    cors_origin: str = CORS_ALLOW_ORIGIN,
) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        service: Service to serve; a fresh cache and client are created
            when omitted.
        cors_origin: Value sent as Access-Control-Allow-Origin.

    Returns:
        Configured web.Application.
    """
    if service is None:
        service = PokedexService(ResponseCache(), PokeAPIClient())

    app = web.Application(
        middlewares=[access_log_middleware, cors_middleware, error_middleware]
    )
    app[SERVICE_KEY] = service
    app[CORS_ORIGIN_KEY] = cors_origin
    app.add_routes(routes)
    app.on_startup.append(_on_startup)
    app.on_cleanup.append(_on_cleanup)
    return app


async def main() -> None:
    """
    Main server startup function.

    Validates configuration, starts the HTTP site, checks upstream
    reachability and serves until cancelled.
    """
    setup_logging()

    try:
        validate_settings()
    except ValueError as e:
        logger.critical(f"❌ Configuration validation failed: {e}")
        sys.exit(1)

    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, HOST, PORT)
    await site.start()
    logger.info(f"API ready on http://{HOST}:{PORT}")

    await app[SERVICE_KEY].client.validate_api_connectivity()

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user (Ctrl+C)")
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=e)
        sys.exit(1)
