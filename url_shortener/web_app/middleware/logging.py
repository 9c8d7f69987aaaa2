"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and its outcome.

    Client errors are logged at WARNING and server errors at ERROR. The client
    address prefers X-Forwarded-For (set on request.state by
    ForwardedHeadersMiddleware). Authenticated requests also name the user.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("url_shortener.web")

    @staticmethod
    def client_address(request: Request) -> str:
        forwarded_for = getattr(request.state, "forwarded_for", None)
        if forwarded_for:
            # First entry is the originating client
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        target = f"{request.method} {request.url.path}"

        self.logger.debug(f"Request: {target} from {self.client_address(request)}")

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        message = f"{target} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        # Set by get_current_principal on authenticated routes
        principal = getattr(request.state, "principal", None)
        if principal is not None:
            message += f" user={principal.login}"
        self.logger.log(level, message)

        return response
