"""
app/core/errors.py

Purpose: HTTP error rendering

- TelecomError subclasses raised by routes (carrier / repository failures)
- Unknown routes and wrong methods
- Anything unhandled, with details hidden in production
All are rendered as ErrorResponse JSON.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import TelecomError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, error: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(TelecomError)
    async def telecom_exception_handler(request: Request, exc: TelecomError):
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message} {exc.details or ''}")
        return error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True
        )
        if request.app.state.settings.is_production:
            return error_response(500, "An internal error occurred. Please try again later.", "INTERNAL_ERROR")
        return error_response(500, str(exc), "INTERNAL_ERROR", {"type": type(exc).__name__})
