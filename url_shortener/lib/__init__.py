"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .resolver import UniqueCodeResolver
from .expiry import ExpiryPolicy
from .visits import VisitCounter
from .ownership import assert_owned_by
from .auth import AuthService
from .service import URLShortenerService
from .stats import StatsService

__all__ = [
    "ShortCodeGenerator",
    "UniqueCodeResolver",
    "ExpiryPolicy",
    "VisitCounter",
    "assert_owned_by",
    "AuthService",
    "URLShortenerService",
    "StatsService",
]
