"""
Global exception handlers for the API layer.

These handlers turn exceptions raised by the Zoraxy client and the import
service into HTTP responses, so endpoints don't need try/except blocks.
Error bodies are ``{"error": <message>}``, which is what the plugin UI reads.
"""

from fastapi import Request, status
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from blocklist_manager.core.exceptions import (
    AppException,
    ImportInProgressError,
    UpstreamError,
)
from blocklist_manager.utils.logger import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    logger.error(f"Error occurred: {message}")
    return JSONResponse(status_code=status_code, content={"error": message})


async def upstream_exception_handler(
        request: Request, exc: UpstreamError
) -> JSONResponse:
    """
    Handle UpstreamError (Zoraxy unreachable, non-2xx, or garbage body).
    Maps to HTTP 502 Bad Gateway.
    """
    return _error_response(status.HTTP_502_BAD_GATEWAY, exc.message)


async def import_in_progress_exception_handler(
        request: Request, exc: ImportInProgressError
) -> JSONResponse:
    """
    Handle ImportInProgressError.
    Maps to HTTP 409 Conflict.
    """
    return _error_response(status.HTTP_409_CONFLICT, exc.message)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Fallback handler for any AppException that wasn't caught by more specific handlers.
    Maps to HTTP 500 Internal Server Error.
    """
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


async def not_found_exception_handler(
        request: Request, exc: StarletteHTTPException
) -> Response:
    """
    Plain-text 404 for unmatched routes; every other HTTPException gets FastAPI's default.
    """
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return await default_http_exception_handler(request, exc)
    logger.warning(f"404 Not Found: {request.url.path}")
    return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)


# Dictionary mapping exception types to their handlers
# Registered all at once in main.create_app
EXCEPTION_HANDLERS = {
    UpstreamError: upstream_exception_handler,
    ImportInProgressError: import_in_progress_exception_handler,
    AppException: app_exception_handler,
    StarletteHTTPException: not_found_exception_handler,
}
