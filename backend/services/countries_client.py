"""REST Countries API client (https://restcountries.com/v3.1).

Free API, no key required. Translates a country name into a full-text name
search and maps the first match onto our ``Country`` record.
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from errors import (
    CountryAPIError,
    CountryNotFoundError,
    InvalidRequestError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)
from models import Country, RestCountry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://restcountries.com/v3.1"

_rest_countries = TypeAdapter(list[RestCountry])


class CountriesClient:
    """Async client holding one pooled ``httpx.AsyncClient``.

    Args:
        base_url: Upstream API root. Defaults to the public v3.1 API.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests to stub the upstream.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def search_by_name(self, name: str, timeout: float | None = None) -> Country:
        """Look up a country by its full name.

        Raises:
            InvalidRequestError: ``name`` is empty.
            CountryNotFoundError: upstream has no country with that name.
            UpstreamTimeoutError: upstream did not answer in time.
            UpstreamFailureError: transport error or unexpected status code.
            CountryAPIError: upstream answered 200 with a body we cannot parse.
        """
        if not name:
            raise InvalidRequestError("Country name is required")

        # e.g. /name/India?fullText=true
        path = f"/name/{quote(name, safe='')}"
        logger.info("Fetching country data from: %s%s", self.base_url, path)

        try:
            resp = await self._http.get(
                path,
                params={"fullText": "true"},
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timeout for country %s: %s", name, e)
            raise UpstreamTimeoutError() from e
        except httpx.HTTPError as e:
            logger.error("Error executing request for country %s: %s", name, e)
            raise UpstreamFailureError(f"External service is unavailable: {e}") from e

        if resp.status_code == 404:
            logger.info("Country not found: %s", name)
            raise CountryNotFoundError(name)
        if resp.status_code != 200:
            logger.error("API returned status %d for country: %s", resp.status_code, name)
            raise UpstreamFailureError(f"External service returned status {resp.status_code}")

        try:
            countries = _rest_countries.validate_json(resp.content)
        except ValidationError as e:
            logger.error("Error parsing response for country %s: %s", name, e)
            raise CountryAPIError("Failed to parse external service response") from e

        if not countries:
            raise CountryNotFoundError(name)

        return countries[0].to_country()

    async def aclose(self) -> None:
        await self._http.aclose()
