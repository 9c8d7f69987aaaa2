"""In-process implementation of the URL shortener store.

Used when no DATABASE_URL is configured and by the test suite. Data lives in
plain dictionaries guarded by one asyncio lock, so it is lost on restart and is
not shared between uvicorn worker processes.
"""

import asyncio
import dataclasses
import itertools
import logging
from datetime import datetime
from typing import Dict, List, Optional

from ..exceptions import ConflictError, ShortCodeConflictError
from .base import URLShortenerDBBase
from .models import URLMapping, User, as_utc


class URLShortenerMemoryDB(URLShortenerDBBase):
    """Dictionary-backed store."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__("memory://")
        self.logger = logger or logging.getLogger(__name__)

        self._lock = asyncio.Lock()
        self._user_ids = itertools.count(1)
        self._mapping_ids = itertools.count(1)

        self._users: Dict[int, User] = {}
        self._mappings: Dict[int, URLMapping] = {}
        # short_code -> mapping id
        self._codes: Dict[str, int] = {}

    async def create_user(
        self,
        login: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        async with self._lock:
            for user in self._users.values():
                if user.login == login:
                    raise ConflictError(f"User with login '{login}' already exists")
                if user.email.lower() == email.lower():
                    raise ConflictError(f"User with email '{email}' already exists")

            user = User(
                id=next(self._user_ids),
                login=login,
                email=email,
                password_hash=password_hash,
                created_at=as_utc(created_at),
            )
            self._users[user.id] = user
            return user

    async def get_user_by_login(self, login: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.login == login), None)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self._users.values() if u.email.lower() == email), None)

    async def create_url_mapping(
        self,
        short_code: str,
        long_url: str,
        owner_id: int,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> URLMapping:
        async with self._lock:
            if short_code in self._codes:
                raise ShortCodeConflictError(f"Short code '{short_code}' already exists")

            mapping = URLMapping(
                id=next(self._mapping_ids),
                short_code=short_code,
                long_url=long_url,
                owner_id=owner_id,
                created_at=as_utc(created_at),
                expires_at=as_utc(expires_at),
                visits=0,
            )
            self._mappings[mapping.id] = mapping
            self._codes[short_code] = mapping.id
            return mapping

    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        mapping_id = self._codes.get(short_code)
        if mapping_id is None:
            return None
        return self._mappings.get(mapping_id)

    async def short_code_exists(self, short_code: str) -> bool:
        return short_code in self._codes

    async def update_url_mapping(
        self,
        mapping_id: int,
        short_code: str,
        expires_at: Optional[datetime],
    ) -> Optional[URLMapping]:
        async with self._lock:
            mapping = self._mappings.get(mapping_id)
            if mapping is None:
                return None

            if short_code != mapping.short_code and short_code in self._codes:
                raise ShortCodeConflictError(f"Short code '{short_code}' already exists")

            updated = dataclasses.replace(
                mapping,
                short_code=short_code,
                expires_at=as_utc(expires_at),
            )
            del self._codes[mapping.short_code]
            self._codes[short_code] = mapping_id
            self._mappings[mapping_id] = updated
            return updated

    async def increment_visits(self, mapping_id: int, short_code: str) -> Optional[int]:
        async with self._lock:
            mapping = self._mappings.get(mapping_id)
            if mapping is None or mapping.short_code != short_code:
                return None

            updated = dataclasses.replace(mapping, visits=mapping.visits + 1)
            self._mappings[mapping_id] = updated
            return updated.visits

    async def delete_url_mapping(self, mapping_id: int) -> bool:
        async with self._lock:
            mapping = self._mappings.pop(mapping_id, None)
            if mapping is None:
                return False
            del self._codes[mapping.short_code]
            return True

    async def list_url_mappings_by_owner(self, owner_id: int) -> List[URLMapping]:
        return sorted(
            (m for m in self._mappings.values() if m.owner_id == owner_id),
            key=lambda m: (m.created_at, m.id),
        )

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")

    async def health_check(self) -> bool:
        return True
