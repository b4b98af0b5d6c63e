"""
Exception-to-response mapping.

Every error leaves the API as {"code", "message", "timestamp"}:
- RideShareError subclasses carry their own status and code
- request body validation failures -> 400 VALIDATION_ERROR
- HTTPException from auth dependencies -> its status (401/403/...)
- anything else -> 500 INTERNAL_ERROR, logged with traceback
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.errors import RideShareError
from src.api.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the standard error body."""
    body = ErrorResponse(code=code, message=message, timestamp=datetime.now(timezone.utc))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def rideshare_error_handler(request: Request, exc: RideShareError) -> JSONResponse:
    logger.info(
        "Request rejected",
        extra={"error_code": exc.code, "error_message": exc.message, "path": request.url.path},
    )
    return error_response(exc.status_code, exc.code, exc.message)


def _format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = error.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = ", ".join(_format_validation_error(e) for e in exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred.",
    )


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers to `app`. Specific kinds are registered before the catch-all."""
    app.add_exception_handler(RideShareError, rideshare_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
