"""FastAPI application entry point for the country API."""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from models import Country
from services.cache import ExpiringCache
from services.countries_client import CountriesClient
from services.country_service import CountryService

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    problems = settings.validate()
    if problems:
        logger.warning("Invalid configuration: %s", ", ".join(problems))

    logger.info(
        "Starting with cache TTL %ss, client timeout %ss, upstream %s",
        settings.cache_ttl_seconds,
        settings.client_timeout_seconds,
        settings.countries_api_base_url,
    )

    cache: ExpiringCache[Country] = ExpiringCache(settings.cache_ttl_seconds)
    cache.start()
    client = CountriesClient(
        base_url=settings.countries_api_base_url,
        timeout=settings.client_timeout_seconds,
    )
    app.state.country_service = CountryService(client, cache)

    yield

    cache.stop()
    await client.aclose()
    logger.info("Server exited cleanly")


def create_app() -> FastAPI:
    app = FastAPI(title="Country API", version="1.0.0", lifespan=lifespan)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.countries import router as countries_router
    from routes.health import router as health_router

    app.include_router(health_router)
    app.include_router(countries_router)

    return app


app = create_app()


def run() -> None:
    """Serve the app; uvicorn drains in-flight requests on SIGINT/SIGTERM."""
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )


if __name__ == "__main__":
    run()
