"""Per-user URL statistics."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .database.base import URLShortenerDBBase
from .database.models import Principal, URLMapping
from .expiry import ExpiryPolicy
from .ownership import assert_owned_by


@dataclass(frozen=True)
class MappingStats:
    mapping: URLMapping
    active: bool


@dataclass(frozen=True)
class UserStats:
    total_visits: int
    urls: List[MappingStats] = field(default_factory=list)


class StatsService:
    """Read-only statistics over the mappings a user owns."""

    def __init__(
        self,
        db: URLShortenerDBBase,
        expiry_policy: Optional[ExpiryPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.expiry = expiry_policy or ExpiryPolicy()
        self.logger = logger or logging.getLogger(__name__)

    async def all_urls(self, principal: Principal) -> UserStats:
        """Every mapping of principal, each flagged active or expired."""
        return await self._collect(principal, active_only=False)

    async def active_urls(self, principal: Principal) -> UserStats:
        """Only the mappings of principal that have not expired."""
        return await self._collect(principal, active_only=True)

    async def visits(self, principal: Principal, short_code: str) -> int:
        """Visit count of one owned mapping.

        Raises:
            ResourceNotFoundError: If missing or owned by someone else
        """
        mapping = assert_owned_by(await self.db.get_url_mapping(short_code), principal)
        return mapping.visits

    async def _collect(self, principal: Principal, active_only: bool) -> UserStats:
        mappings = await self.db.list_url_mappings_by_owner(principal.id)
        # One clock reading so every flag in the response agrees
        now = self.expiry.now()

        urls = []
        for mapping in mappings:
            active = self.expiry.is_active(mapping, now)
            if active_only and not active:
                continue
            urls.append(MappingStats(mapping=mapping, active=active))

        total_visits = sum(item.mapping.visits for item in urls)
        self.logger.debug(
            f"Stats for user {principal.id}: {len(urls)} urls, {total_visits} visits (active_only={active_only})"
        )
        return UserStats(total_visits=total_visits, urls=urls)
