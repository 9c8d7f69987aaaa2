"""URL shortener service: short codes, expiry, visit accounting and per-user statistics."""

__version__ = "1.0.0"
