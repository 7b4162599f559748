"""Integration tests for the HTTP endpoints."""

import pytest
from httpx import AsyncClient

from app import app, lifespan
from errors import (
    CountryAPIError,
    CountryNotFoundError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_ready(client: AsyncClient):
    resp = await client.get("/ready")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["service"] == "country-api"


@pytest.mark.asyncio
async def test_search_success(client: AsyncClient):
    resp = await client.get("/api/countries/search", params={"name": "India"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == {
        "name": "India",
        "capital": "New Delhi",
        "currency": "₹",
        "population": 1417492000,
    }


@pytest.mark.asyncio
async def test_search_sets_security_headers(client: AsyncClient):
    resp = await client.get("/api/countries/search", params={"name": "India"})
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_search_uses_cache_across_spellings(client: AsyncClient, stub_lookup):
    await client.get("/api/countries/search", params={"name": "India"})
    resp = await client.get("/api/countries/search", params={"name": " INDIA "})

    assert resp.status_code == 200
    assert stub_lookup.calls == ["India"]


@pytest.mark.asyncio
async def test_search_missing_name(client: AsyncClient, stub_lookup):
    resp = await client.get("/api/countries/search")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"
    assert stub_lookup.calls == []


@pytest.mark.asyncio
async def test_search_blank_name(client: AsyncClient):
    resp = await client.get("/api/countries/search", params={"name": "   "})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"])
async def test_search_wrong_method(client: AsyncClient, stub_lookup, method):
    resp = await client.request(method, "/api/countries/search", params={"name": "India"})
    assert resp.status_code == 400
    if method != "HEAD":
        assert resp.json()["message"] == "Only GET method is supported"
    assert stub_lookup.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status_code",
    [
        (CountryNotFoundError("Atlantis"), 404),
        (UpstreamTimeoutError(), 504),
        (UpstreamFailureError(), 502),
        (CountryAPIError("Failed to parse external service response"), 500),
    ],
)
async def test_search_maps_errors(client: AsyncClient, stub_lookup, error, status_code):
    stub_lookup.error = error

    resp = await client.get("/api/countries/search", params={"name": "Atlantis"})

    assert resp.status_code == status_code
    data = resp.json()
    assert data["error"] == error.title
    assert data["message"] == str(error)


@pytest.mark.asyncio
async def test_search_unexpected_error(client: AsyncClient, stub_lookup):
    stub_lookup.error = RuntimeError("boom")

    resp = await client.get("/api/countries/search", params={"name": "India"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Internal error"
    assert "boom" not in resp.text


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_cache():
    async with lifespan(app):
        service = app.state.country_service
        assert service.cache.running

    assert not service.cache.running
