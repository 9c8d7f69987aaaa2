"""Business logic service for URL shortener."""

import logging
from typing import Optional, Dict
from datetime import datetime

from .shortcode import ShortCodeGenerator
from .resolver import UniqueCodeResolver
from .expiry import ExpiryPolicy
from .visits import VisitCounter
from .ownership import URL_NOT_FOUND_MESSAGE, assert_owned_by
from .database.base import URLShortenerDBBase
from .database.cache import RedisCache
from .database.models import Principal, URLMapping
from .common.validators import is_valid_url, is_valid_short_code
from .exceptions import ResourceNotFoundError, UrlExpiredError, ValidationError


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Owner-scoped operations take the acting Principal explicitly.
    """

    def __init__(
        self,
        db: URLShortenerDBBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        max_code_length_growth: int = 2,
        expiry_policy: Optional[ExpiryPolicy] = None,
    ):
        """Initialize URL shortener service.

        Args:
            db: Database instance
            cache: Optional cache instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Candidates per code length before widening
            max_code_length_growth: Extra characters the collision fallback may add
            expiry_policy: Optional expiry policy (clock injection for tests)
        """
        self.db = db
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.expiry = expiry_policy or ExpiryPolicy()
        self.resolver = UniqueCodeResolver(
            db=db,
            generator=self.generator,
            max_attempts=max_collision_retries,
            max_length_growth=max_code_length_growth,
            logger=self.logger,
        )
        self.visit_counter = VisitCounter(db, logger=self.logger)

    async def shorten(
        self,
        principal: Principal,
        long_url: str,
        expires_at: Optional[datetime] = None,
    ) -> URLMapping:
        """Create a new short URL owned by principal.

        Args:
            principal: Acting user
            long_url: The original long URL
            expires_at: Optional expiry, must be in the future

        Returns:
            The stored mapping

        Raises:
            ValidationError: If the URL or the expiry is invalid
            ShortCodeExhaustedError: If no free code could be found
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}")

        expires_at = self.expiry.validate_future_or_null(expires_at)
        created_at = self.expiry.now()

        async def insert(short_code: str) -> URLMapping:
            return await self.db.create_url_mapping(
                short_code=short_code,
                long_url=long_url,
                owner_id=principal.id,
                created_at=created_at,
                expires_at=expires_at,
            )

        mapping = await self.resolver.persist_with_unique_code(insert, long_url=long_url)

        if self.cache:
            await self.cache.set_mapping(mapping)

        self.logger.info(f"Created short URL for user {principal.id}: {mapping.short_code} -> {long_url}")
        return mapping

    async def resolve(self, short_code: str) -> URLMapping:
        """Resolve a short code and count the visit.

        Args:
            short_code: The short code to lookup

        Returns:
            The mapping with its updated visit count

        Raises:
            ValidationError: If the code is malformed
            ResourceNotFoundError: If no mapping uses the code
            UrlExpiredError: If the mapping has expired
        """
        is_valid, error = is_valid_short_code(short_code)
        if not is_valid:
            raise ValidationError(f"Invalid short code: {error}")

        mapping = None
        if self.cache:
            mapping = await self.cache.get_mapping(short_code)
            if mapping:
                self.logger.debug(f"Cache hit for {short_code}")

        if mapping is None:
            mapping = await self.db.get_url_mapping(short_code)
            if mapping is None:
                self.logger.info(f"Short code not found: {short_code}")
                raise ResourceNotFoundError(URL_NOT_FOUND_MESSAGE)
            if self.cache:
                await self.cache.set_mapping(mapping)

        if not self.expiry.is_active(mapping):
            self.logger.info(f"Short code expired: {short_code}")
            raise UrlExpiredError("URL has expired")

        try:
            mapping = await self.visit_counter.record_visit(mapping)
        except ResourceNotFoundError:
            # Deleted or re-issued after the lookup; drop any stale cache entry
            if self.cache:
                await self.cache.delete_mapping(short_code)
            raise

        self.logger.debug(f"Resolved {short_code} -> {mapping.long_url} ({mapping.visits} visits)")
        return mapping

    async def get_owned_mapping(self, principal: Principal, short_code: str) -> URLMapping:
        """Load a mapping that must belong to principal.

        Raises:
            ResourceNotFoundError: If missing or owned by someone else
        """
        mapping = await self.db.get_url_mapping(short_code)
        return assert_owned_by(mapping, principal)

    async def update(
        self,
        principal: Principal,
        short_code: str,
        expires_at: Optional[datetime] = None,
    ) -> URLMapping:
        """Issue a new short code for an owned mapping, optionally changing its expiry.

        The expiry is left untouched when expires_at is None.

        Args:
            principal: Acting user
            short_code: Current short code of the mapping
            expires_at: Optional new expiry, must be in the future

        Returns:
            The updated mapping

        Raises:
            ResourceNotFoundError: If missing or owned by someone else
            ValidationError: If the expiry is not in the future
        """
        mapping = await self.get_owned_mapping(principal, short_code)
        expires_at = self.expiry.validate_future_or_null(expires_at)
        new_expires_at = expires_at if expires_at is not None else mapping.expires_at

        async def rewrite(new_code: str) -> Optional[URLMapping]:
            return await self.db.update_url_mapping(mapping.id, new_code, new_expires_at)

        updated = await self.resolver.persist_with_unique_code(rewrite)
        if updated is None:
            raise ResourceNotFoundError(URL_NOT_FOUND_MESSAGE)

        if self.cache:
            await self.cache.delete_mapping(short_code)
            await self.cache.set_mapping(updated)

        self.logger.info(f"Updated short URL for user {principal.id}: {short_code} -> {updated.short_code}")
        return updated

    async def delete(self, principal: Principal, short_code: str) -> None:
        """Delete an owned mapping.

        Raises:
            ResourceNotFoundError: If missing or owned by someone else
        """
        mapping = await self.get_owned_mapping(principal, short_code)

        if self.cache:
            await self.cache.delete_mapping(short_code)

        if not await self.db.delete_url_mapping(mapping.id):
            raise ResourceNotFoundError(URL_NOT_FOUND_MESSAGE)

        self.logger.info(f"Deleted short URL for user {principal.id}: {short_code}")

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.db.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
