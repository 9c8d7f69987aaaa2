"""Expiry policy for URL mappings."""

from datetime import datetime, timezone
from typing import Callable, Optional

from .database.models import URLMapping, as_utc
from .exceptions import ValidationError

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpiryPolicy:
    """Decides whether an expiry timestamp is acceptable and whether a mapping is live.

    A mapping is active while now < expires_at; the instant equal to expires_at
    is already expired. Naive timestamps are read as UTC.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utcnow

    def now(self) -> datetime:
        return as_utc(self.clock())

    def validate_future_or_null(self, expires_at: Optional[datetime]) -> Optional[datetime]:
        """Reject an expiry that is not strictly in the future.

        Returns:
            The expiry normalized to aware UTC, or None

        Raises:
            ValidationError: If expires_at is set and not after now
        """
        if expires_at is None:
            return None

        expires_at = as_utc(expires_at)
        if expires_at <= self.now():
            raise ValidationError("Expiration date must be in the future")
        return expires_at

    def is_active(self, mapping: URLMapping, now: Optional[datetime] = None) -> bool:
        return self.is_active_at(mapping.expires_at, now)

    def is_active_at(self, expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
        if expires_at is None:
            return True
        now = as_utc(now) if now is not None else self.now()
        return as_utc(expires_at) > now
