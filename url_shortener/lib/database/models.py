"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return an aware UTC datetime; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class URLMapping:
    """A stored short code -> long URL association."""

    id: int
    short_code: str
    long_url: str
    owner_id: int
    created_at: datetime
    expires_at: Optional[datetime] = None
    visits: int = 0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "URLMapping":
        """Build from a database row (asyncpg Record or dict)."""
        return cls(
            id=record["id"],
            short_code=record["short_url_code"],
            long_url=record["long_url"],
            owner_id=record["user_id"],
            created_at=as_utc(record["created_at"]),
            expires_at=as_utc(record["expires_at"]),
            visits=record["visits"],
        )


@dataclass(frozen=True)
class User:
    """A registered user."""

    id: int
    login: str
    email: str
    password_hash: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        """Build from a database row."""
        return cls(
            id=record["id"],
            login=record["login"],
            email=record["email"],
            password_hash=record["password_hash"],
            created_at=as_utc(record["created_at"]),
        )


@dataclass(frozen=True)
class Principal:
    """The authenticated user a core call acts on behalf of."""

    id: int
    login: str
