"""Shared test fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app import app
from models import Country
from routes.countries import get_country_service
from services.cache import ExpiringCache
from services.country_service import CountryService

INDIA = Country(name="India", capital="New Delhi", currency="₹", population=1417492000)

INDIA_PAYLOAD = [
    {
        "name": {"common": "India", "official": "Republic of India"},
        "capital": ["New Delhi"],
        "population": 1417492000,
        "currencies": {"INR": {"name": "Indian rupee", "symbol": "₹"}},
    }
]


class StubLookup:
    """Stands in for CountriesClient; records every name it is asked for."""

    def __init__(self, result: Country | None = INDIA, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def search_by_name(self, name: str) -> Country:
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def cache():
    with ExpiringCache(60) as c:
        yield c


@pytest.fixture
def stub_lookup():
    return StubLookup()


@pytest.fixture
def service(stub_lookup, cache):
    return CountryService(stub_lookup, cache)


@pytest_asyncio.fixture
async def client(service):
    app.dependency_overrides[get_country_service] = lambda: service
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
