"""Abstract base class for URL shortener database implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import URLMapping, User


class URLShortenerDBBase(ABC):
    """Abstract base class for URL shortener database operations.

    Implementations must enforce short code uniqueness on write and raise
    ShortCodeConflictError when it is violated.
    """

    def __init__(self, db_config: str):
        """Initialize database connection.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    # Users

    @abstractmethod
    async def create_user(
        self,
        login: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        """Create a new user.

        Raises:
            ConflictError: If the login or the email is already registered
        """

    @abstractmethod
    async def get_user_by_login(self, login: str) -> Optional[User]:
        """Look up a user by login."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email."""

    # URL mappings

    @abstractmethod
    async def create_url_mapping(
        self,
        short_code: str,
        long_url: str,
        owner_id: int,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> URLMapping:
        """Create a new short URL mapping with zero visits.

        Raises:
            ShortCodeConflictError: If short_code is already taken
        """

    @abstractmethod
    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        """Get the mapping for a short code, or None if not found."""

    @abstractmethod
    async def short_code_exists(self, short_code: str) -> bool:
        """Check if a short code is currently taken."""

    @abstractmethod
    async def update_url_mapping(
        self,
        mapping_id: int,
        short_code: str,
        expires_at: Optional[datetime],
    ) -> Optional[URLMapping]:
        """Replace the short code and expiry of a mapping.

        Returns:
            The updated mapping, or None if it no longer exists

        Raises:
            ShortCodeConflictError: If short_code is already taken
        """

    @abstractmethod
    async def increment_visits(self, mapping_id: int, short_code: str) -> Optional[int]:
        """Atomically add one visit to the mapping while it still uses short_code.

        Returns:
            The new visit count, or None if the mapping is gone or was
            re-issued under another code
        """

    @abstractmethod
    async def delete_url_mapping(self, mapping_id: int) -> bool:
        """Delete a mapping.

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list_url_mappings_by_owner(self, owner_id: int) -> List[URLMapping]:
        """List every mapping owned by a user, oldest first."""

    # Lifecycle

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy."""
