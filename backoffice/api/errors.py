"""
Exception handlers that render every error in the ``ApiResponse`` envelope.
"""

from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice.schemas.response import api_response
from backoffice.search import SearchError
from backoffice.utils.logging import log_error

# Location prefixes FastAPI adds in front of the field name
_LOCATION_PREFIXES = {"body", "query", "path", "form", "header", "cookie"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc if part not in _LOCATION_PREFIXES]
    return ".".join(parts) or "general"


def validation_errors(exc: RequestValidationError) -> Dict[str, str]:
    """First message per field, e.g. ``{"email": "value is not a valid email address"}``."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(_field_name(error["loc"]), message)
    return errors


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=api_response(False, str(exc.detail), error=exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=api_response(False, "Validation failed", error=validation_errors(exc)),
    )


async def search_exception_handler(request: Request, exc: SearchError) -> JSONResponse:
    log_error(exc, f"Search failed for {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=api_response(False, "Failed to fetch records", error=str(exc)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(exc, f"Unhandled error for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=api_response(False, "Internal server error", error="Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SearchError, search_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
