"""Database layer for URL shortener."""

from .base import URLShortenerDBBase
from .memory import URLShortenerMemoryDB
from .postgres import URLShortenerPostgresDB
from .cache import RedisCache
from .models import URLMapping, User, Principal

__all__ = [
    "URLShortenerDBBase",
    "URLShortenerMemoryDB",
    "URLShortenerPostgresDB",
    "RedisCache",
    "URLMapping",
    "User",
    "Principal",
]
