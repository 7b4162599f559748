"""Country search route."""

import logging

from fastapi import APIRouter, Depends, Query, Request

from errors import InvalidRequestError
from models import Country
from services.country_service import CountryService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_country_service(request: Request) -> CountryService:
    """The process-wide service built in the app lifespan."""
    return request.app.state.country_service


# Registered for every method so non-GET requests get our 400 body instead of a 405
@router.api_route(
    "/api/countries/search",
    methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    response_model=Country,
)
async def search_country(
    request: Request,
    name: str | None = Query(None),
    service: CountryService = Depends(get_country_service),
) -> Country:
    """Look up capital, currency and population for a country name."""
    if request.method != "GET":
        raise InvalidRequestError("Only GET method is supported")
    if not name or not name.strip():
        raise InvalidRequestError("Query parameter 'name' is required")

    logger.info("Searching for country: %s", name)
    return await service.search_country(name)
