"""
HTTP routes for the Pokedex gateway.

Thin aiohttp handlers that translate query/path parameters into calls on
PokedexService and return its envelopes as JSON. Errors are left to the
application's error middleware.
"""

import logging

from aiohttp import web

from utils.pokedex_service import PokedexService

logger = logging.getLogger("pokedex_gateway.routes")

SERVICE_KEY = web.AppKey("pokedex_service", PokedexService)

routes = web.RouteTableDef()


@routes.get("/health")
async def health(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    return web.json_response({"status": "ok", "cache": service.get_cache_stats()})


# Registered before /api/pokemon/{name} so "catalog" is not taken as a name.
@routes.get("/api/pokemon/catalog")
async def catalog(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    return web.json_response(await service.get_catalog())


@routes.get("/api/pokemon")
async def lookup_by_query(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    return web.json_response(await service.get_pokemon(request.query.get("name")))


@routes.get("/api/pokemon/{name}/matchups")
async def matchups(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    payload = await service.get_matchups(
        request.match_info["name"], request.query.get("opponent")
    )
    return web.json_response(payload)


@routes.get("/api/pokemon/{name}")
async def lookup(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    return web.json_response(await service.get_pokemon(request.match_info["name"]))
