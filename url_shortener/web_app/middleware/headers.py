"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from ...lib.common.urls import build_base_url, resolve_path_prefix


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Work out the public base URL and path prefix of the request.

    Sets request.state.base_url and request.state.path_prefix from
    X-Forwarded-Proto/Host/Prefix, falling back to the Host header and then
    to the configured base_url and path_prefix.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        config = request.app.state.config
        headers = dict(request.headers)

        request.state.base_url = build_base_url(
            headers=headers,
            fallback_base_url=config.base_url,
            request_scheme=request.url.scheme,
            request_host=request.headers.get("host"),
        )
        request.state.path_prefix = resolve_path_prefix(headers, config.path_prefix)
        request.state.forwarded_for = request.headers.get("x-forwarded-for")

        return await call_next(request)
