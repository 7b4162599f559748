"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CountryAPIError(Exception):
    """Base exception with HTTP status code."""

    title = "Internal error"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class InvalidRequestError(CountryAPIError):
    title = "Invalid request"

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, status_code=400)


class CountryNotFoundError(CountryAPIError):
    title = "Not found"

    def __init__(self, name: str):
        super().__init__(f"Country not found: {name}", status_code=404)
        self.name = name


class UpstreamFailureError(CountryAPIError):
    title = "Service unavailable"

    def __init__(self, message: str = "External service is unavailable"):
        super().__init__(message, status_code=502)


class UpstreamTimeoutError(CountryAPIError):
    title = "Timeout"

    def __init__(self, message: str = "Request to external service timed out"):
        super().__init__(message, status_code=504)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse({"error": error, "message": message}, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(CountryAPIError)
    async def handle_country_api_error(_request: Request, exc: CountryAPIError):
        if exc.status_code >= 500:
            logger.warning("Request failed with %d: %s", exc.status_code, exc)
        return error_response(exc.status_code, exc.title, str(exc))

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return error_response(400, InvalidRequestError.title, str(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return error_response(500, CountryAPIError.title, "An unexpected error occurred")
