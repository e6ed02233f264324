"""Mapping of errors onto HTTP responses."""

import asyncio
import logging
from typing import Awaitable, TypeVar

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from siteforge.errors import (
    GenerationError,
    InvalidInputError,
    NotFoundError,
    ProviderConfigurationError,
    RateLimitedError,
    RequestTimeoutError,
    ServiceUnavailableError,
    SiteForgeError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUOTA_MESSAGE = "API quota exceeded. Please try again later."
UNAVAILABLE_MESSAGE = "Unable to connect to external service. Please try again later."
INTERNAL_MESSAGE = "An internal server error occurred. Please try again later."

_CONNECTION_SIGNATURES = ("econnrefused", "enotfound", "connection refused", "connection error")


def classify_provider_error(error: Exception, action: str) -> SiteForgeError:
    """Translate an arbitrary provider exception by its message signature."""
    message = str(error).lower()

    if "quota" in message or "limit" in message:
        return RateLimitedError(QUOTA_MESSAGE, retry_after=60)
    if "timeout" in message or "timed out" in message:
        return RequestTimeoutError(f"{action.capitalize()} request timed out. Please try again.")
    if isinstance(error, (httpx.ConnectError, ConnectionError)) or any(
        signature in message for signature in _CONNECTION_SIGNATURES
    ):
        return ServiceUnavailableError(UNAVAILABLE_MESSAGE)
    return GenerationError(f"Failed to {action}. Please try again.")


async def call_with_deadline(awaitable: Awaitable[T], timeout: float, action: str) -> T:
    """Await a provider-bound step under the request deadline.

    Raises:
        RequestTimeoutError: when the deadline passes
        SiteForgeError: classified provider failure
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise RequestTimeoutError(f"{action.capitalize()} request timed out. Please try again.")
    except SiteForgeError:
        raise
    except Exception as e:
        logger.error(f"Failed to {action}: {e}")
        raise classify_provider_error(e, action) from e


def _field_from_location(location: tuple) -> str | None:
    parts = [str(part) for part in location if part != "body"]
    return ".".join(parts) or None


def register_exception_handlers(app: FastAPI, development: bool) -> None:
    """Install handlers that render the error taxonomy as JSON."""

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message, "field": exc.field},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": first.get("msg", "Invalid request"),
                "field": _field_from_location(tuple(first.get("loc", ()))),
            },
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(RateLimitedError)
    async def rate_limited_handler(request: Request, exc: RateLimitedError):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"error": str(exc), "retryAfter": exc.retry_after},
        )

    @app.exception_handler(RequestTimeoutError)
    async def timeout_handler(request: Request, exc: RequestTimeoutError):
        return JSONResponse(
            status_code=status.HTTP_408_REQUEST_TIMEOUT, content={"error": str(exc)}
        )

    @app.exception_handler(ServiceUnavailableError)
    async def unavailable_handler(request: Request, exc: ServiceUnavailableError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": str(exc)}
        )

    @app.exception_handler(ProviderConfigurationError)
    async def provider_configuration_handler(request: Request, exc: ProviderConfigurationError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"error": str(exc)}
        )

    @app.exception_handler(GenerationError)
    async def generation_handler(request: Request, exc: GenerationError):
        content = {"error": str(exc)}
        if development and exc.__cause__ is not None:
            content["details"] = str(exc.__cause__)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {"error": INTERNAL_MESSAGE}
        if development:
            content["details"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
