from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from server import create_app
from utils.errors import InternalError, NotFoundError, UpstreamError
from utils.normalize import format_pokemon
from utils.pokedex_service import PokedexService


@pytest.fixture
def fake_client(bulbasaur_payloads, squirtle_payloads):
    creatures = {
        "bulbasaur": format_pokemon(*bulbasaur_payloads),
        "squirtle": format_pokemon(*squirtle_payloads),
    }
    client = MagicMock()

    async def fetch_pokemon(name):
        if name not in creatures:
            raise NotFoundError("Pokémon not found")
        return creatures[name]

    client.fetch_pokemon = AsyncMock(side_effect=fetch_pokemon)
    client.fetch_catalog = AsyncMock(return_value=["bulbasaur", "squirtle"])
    client.close = AsyncMock()
    return client


@pytest.mark.asyncio
class TestHTTPBinding:
    @pytest_asyncio.fixture
    async def http(self, cache, fake_client):
        app = create_app(PokedexService(cache, fake_client))
        async with TestClient(TestServer(app)) as client:
            yield client

    async def test_health(self, http):
        resp = await http.get("/health")
        body = await resp.json()

        assert resp.status == 200
        assert body["status"] == "ok"
        assert body["cache"]["capacity"] == 120

    async def test_lookup_by_path(self, http):
        first = await http.get("/api/pokemon/Bulbasaur")
        second = await http.get("/api/pokemon/bulbasaur")

        assert first.status == 200
        assert (await first.json())["source"] == "live"
        body = await second.json()
        assert body["source"] == "cache"
        assert body["data"]["types"] == ["grass", "poison"]

    async def test_lookup_by_query(self, http):
        resp = await http.get("/api/pokemon", params={"name": "squirtle"})
        assert resp.status == 200
        assert (await resp.json())["data"]["name"] == "squirtle"

    async def test_lookup_without_name_is_400(self, http):
        resp = await http.get("/api/pokemon")
        body = await resp.json()

        assert resp.status == 400
        assert body["error"]["status"] == 400

    async def test_invalid_name_is_400(self, http, fake_client):
        resp = await http.get("/api/pokemon/bad%21name")
        body = await resp.json()

        assert resp.status == 400
        assert body == {
            "error": {
                "message": "Use alphanumeric characters or dashes only",
                "status": 400,
            }
        }
        fake_client.fetch_pokemon.assert_not_awaited()

    async def test_not_found_is_404(self, http):
        resp = await http.get("/api/pokemon/missingno")
        body = await resp.json()

        assert resp.status == 404
        assert body["error"] == {"message": "Pokémon not found", "status": 404}

    async def test_upstream_error_is_502(self, http, fake_client):
        fake_client.fetch_pokemon.side_effect = UpstreamError(
            "Vendor error: upstream responded 503 Service Unavailable"
        )
        resp = await http.get("/api/pokemon/bulbasaur")

        assert resp.status == 502
        assert (await resp.json())["error"]["message"].startswith("Vendor error")

    async def test_internal_error_is_500(self, http, fake_client):
        fake_client.fetch_pokemon.side_effect = InternalError(
            "Unexpected error while talking to PokeAPI"
        )
        resp = await http.get("/api/pokemon/bulbasaur")

        assert resp.status == 500
        assert (await resp.json())["error"]["status"] == 500

    async def test_unexpected_exception_is_generic_500(self, http, fake_client):
        fake_client.fetch_catalog.side_effect = RuntimeError("secret detail")
        resp = await http.get("/api/pokemon/catalog")
        body = await resp.json()

        assert resp.status == 500
        assert body["error"] == {"message": "Something went wrong", "status": 500}

    async def test_catalog(self, http):
        resp = await http.get("/api/pokemon/catalog")
        assert resp.status == 200
        assert await resp.json() == {"data": ["bulbasaur", "squirtle"]}

    async def test_matchups(self, http):
        resp = await http.get(
            "/api/pokemon/bulbasaur/matchups", params={"opponent": "squirtle"}
        )
        body = await resp.json()

        assert resp.status == 200
        assert body["meta"] == {
            "subject": "bulbasaur",
            "opponent": {"name": "squirtle", "source": "live"},
        }
        assert body["data"]["versus"]["verdict"] == "Favorable matchup"

    async def test_matchups_without_opponent(self, http):
        resp = await http.get("/api/pokemon/squirtle/matchups")
        body = await resp.json()

        assert body["meta"]["opponent"] is None
        assert body["data"]["versus"] is None

    async def test_unknown_route_is_404_envelope(self, http):
        resp = await http.get("/nope")
        assert resp.status == 404
        assert await resp.json() == {"error": {"message": "Not found", "status": 404}}

    async def test_cors_and_security_headers_on_success(self, http):
        resp = await http.get("/api/pokemon/bulbasaur")

        assert resp.status == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert resp.headers["Referrer-Policy"] == "no-referrer"

    async def test_cors_and_security_headers_on_errors(self, http):
        for path in ("/api/pokemon/bad%21name", "/nope"):
            resp = await http.get(path)

            assert resp.status in (400, 404)
            assert resp.headers["Access-Control-Allow-Origin"] == "*"
            assert resp.headers["X-Content-Type-Options"] == "nosniff"

    async def test_preflight_is_answered_without_handler(self, http, fake_client):
        resp = await http.options(
            "/api/pokemon/bulbasaur",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert resp.status == 204
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "GET" in resp.headers["Access-Control-Allow-Methods"]
        assert resp.headers["Access-Control-Allow-Headers"] == "content-type"
        fake_client.fetch_pokemon.assert_not_awaited()


@pytest.mark.asyncio
async def test_configured_origin_is_echoed(cache, fake_client):
    app = create_app(
        PokedexService(cache, fake_client), cors_origin="http://localhost:5173"
    )
    async with TestClient(TestServer(app)) as client:
        resp = await client.get("/health")

    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert resp.headers["Vary"] == "Origin"
