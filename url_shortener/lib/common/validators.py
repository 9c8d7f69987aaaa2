"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2000
MAX_SHORT_CODE_LENGTH = 50

# Words that would shadow routes served next to GET /{short_code}
RESERVED_SHORT_CODES = {
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "docs", "redoc", "openapi",
}

_LOGIN_RE = re.compile(r"^[a-zA-Z0-9._-]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[a-zA-Z]{2,}$")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ["http", "https"]:
        return False, "URL must use http or https protocol"

    if not result.netloc:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_short_code(short_code: str, max_length: int = MAX_SHORT_CODE_LENGTH) -> Tuple[bool, str]:
    """Validate a short code as presented by a client.

    Args:
        short_code: The short code to validate
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not short_code.isascii() or not short_code.isalnum():
        return False, "Short code can only contain letters and numbers"

    return True, ""


def is_reserved_short_code(short_code: str) -> bool:
    """Check whether a code collides with a reserved route name."""
    return short_code.lower() in RESERVED_SHORT_CODES


def is_valid_login(login: str) -> Tuple[bool, str]:
    """Validate a user login."""
    if not login or not isinstance(login, str):
        return False, "Login is required"

    if not 3 <= len(login) <= 50:
        return False, "Login must be between 3 and 50 characters"

    if not _LOGIN_RE.match(login):
        return False, "Login can only contain letters, numbers, dots, hyphens, and underscores"

    return True, ""


def is_valid_email(email: str) -> Tuple[bool, str]:
    """Validate an email address (shape only, no deliverability check)."""
    if not email or not isinstance(email, str):
        return False, "Email is required"

    if len(email) > 254:
        return False, "Email is too long (max 254 characters)"

    if not _EMAIL_RE.match(email):
        return False, "Email format is not correct"

    return True, ""


def is_valid_password(password: str) -> Tuple[bool, str]:
    """Validate password strength.

    The UTF-8 encoding must fit in 72 bytes (bcrypt input limit).
    """
    if not password or not isinstance(password, str):
        return False, "Password is required"

    if len(password) < 8:
        return False, "Password must be at least 8 characters"

    if len(password.encode("utf-8")) > 72:
        return False, "Password must be at most 72 bytes"

    if not any(c.isdigit() for c in password):
        return False, "Password must contain at least one digit"

    if not any(c.islower() for c in password) or not any(c.isupper() for c in password):
        return False, "Password must contain both lowercase and uppercase letters"

    return True, ""
