"""Country lookup with cache-aside over the REST Countries client."""

import logging
from typing import Protocol

from errors import InvalidRequestError
from models import Country
from services.cache import ExpiringCache

logger = logging.getLogger(__name__)


class CountryLookup(Protocol):
    async def search_by_name(self, name: str) -> Country: ...


def normalize_key(name: str) -> str:
    """Cache key for a country name: trimmed and lower-cased."""
    return name.strip().lower()


class CountryService:
    def __init__(self, client: CountryLookup, cache: ExpiringCache[Country]):
        self.client = client
        self.cache = cache

    async def search_country(self, name: str) -> Country:
        """Return the country named ``name``, from cache when possible.

        Failed lookups propagate unchanged and are not cached.
        """
        name = name.strip()
        if not name:
            raise InvalidRequestError("Query parameter 'name' is required")

        key = normalize_key(name)
        cached, found = self.cache.get(key)
        if found:
            logger.info("Cache hit for country: %s", name)
            return cached

        country = await self.client.search_by_name(name)

        self.cache.set(key, country)
        logger.info("Cached country data for: %s", name)
        return country
