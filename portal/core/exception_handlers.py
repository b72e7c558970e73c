"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain, storage and
framework exceptions to JSON responses shaped {error, message, details}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.core.config import get_settings
from portal.domain.exceptions import PortalException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "AUTHENTICATION_ERROR": 401,
    "DOMAIN_NOT_ALLOWED": 403,
    "NOT_PRE_REGISTERED": 403,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "ALREADY_EXISTS": 409,
    "IDENTITY_CONFLICT": 409,
    "COURSE_IN_USE": 409,
    "PERSISTENCE_CONFLICT": 409,
    "IDENTITY_PROVIDER_ERROR": 500,
    "STORAGE_UNSUPPORTED_TYPE": 400,
    "STORAGE_FILE_TOO_LARGE": 400,
    "STORAGE_EXISTS_ERROR": 409,
}

# Server-side faults: detail is logged, the client gets the bare message.
_OPAQUE_CODES = frozenset({"IDENTITY_PROVIDER_ERROR"})


def _status_for(error_code: str) -> int:
    if error_code in _ERROR_CODE_STATUS:
        return _ERROR_CODE_STATUS[error_code]
    if error_code.startswith("STORAGE_"):
        return 500
    return 400


def _portal_exception_handler(request: Request, exc: PortalException) -> JSONResponse:
    """Return JSON from PortalException.to_dict() with the mapped status code."""
    status = _status_for(exc.error_code)
    content = exc.to_dict()
    if status >= 500:
        logger.error(
            "%s on %s %s: %s (details=%s)",
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
        if exc.error_code in _OPAQUE_CODES or exc.error_code.startswith("STORAGE_"):
            content["details"] = {}
    return JSONResponse(status_code=status, content=content)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: PortalException (and subclasses, including storage errors),
    RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(PortalException, _portal_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
