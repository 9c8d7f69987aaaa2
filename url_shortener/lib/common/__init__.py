"""Common utilities for URL shortener."""

from .validators import (
    is_valid_url,
    is_valid_short_code,
    is_reserved_short_code,
    is_valid_login,
    is_valid_email,
    is_valid_password,
)
from .urls import extract_forwarded_headers, build_base_url, build_short_url, resolve_path_prefix
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_reserved_short_code",
    "is_valid_login",
    "is_valid_email",
    "is_valid_password",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "resolve_path_prefix",
    "setup_logging",
]
