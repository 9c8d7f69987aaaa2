"""Exception hierarchy for the URL shortener core.

Every error a caller can see derives from URLShortenerError and carries the
HTTP status the web layer answers with. ShortCodeConflictError is the one
condition recovered internally (by the uniqueness resolver).
"""


class URLShortenerError(Exception):
    """Base class for URL shortener errors."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(URLShortenerError):
    """Bad input: malformed URL or code, expiry not in the future, weak password."""

    status_code = 400
    error = "Bad Request"


class UrlExpiredError(ValidationError):
    """The mapping exists but its expiry has passed."""


class ResourceNotFoundError(URLShortenerError):
    """Missing entity, or one owned by another user."""

    status_code = 404
    error = "Not Found"


class UnauthorizedError(URLShortenerError):
    """No authenticated principal, or bad credentials."""

    status_code = 401
    error = "Unauthorized"


class ConflictError(URLShortenerError):
    """Duplicate registration identity (login or email)."""

    status_code = 409
    error = "Conflict"


class ShortCodeConflictError(URLShortenerError):
    """The store rejected a write because the short code is already taken."""

    status_code = 409
    error = "Conflict"


class ShortCodeExhaustedError(URLShortenerError):
    """No free short code could be found within the configured attempts."""

    status_code = 503
    error = "Service Unavailable"
