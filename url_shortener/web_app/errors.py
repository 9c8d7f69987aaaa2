"""Exception handlers producing the {status, error, path, message} body."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..lib.exceptions import URLShortenerError, UnauthorizedError

logger = logging.getLogger("url_shortener.web")


def error_response(request: Request, status_code: int, message: str, headers=None) -> JSONResponse:
    """Build the JSON error body used by every handler."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_code,
            "error": reason,
            "path": request.url.path,
            "message": message,
        },
        headers=headers,
    )


async def handle_service_error(request: Request, exc: URLShortenerError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Basic"}

    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(request, exc.status_code, exc.message, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)

    return error_response(request, 400, "; ".join(parts) or "Invalid request")


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(request, 500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on app."""
    app.add_exception_handler(URLShortenerError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
