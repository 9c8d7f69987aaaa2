"""Redis cache layer for URL shortener.

Caches mappings keyed by short code.
Visit counts are never cached; they always go to the store.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .models import URLMapping


class RedisCache:
    """Redis cache for URL mappings.

    Every operation degrades to a miss on Redis errors, so the store stays the
    source of truth.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get_mapping(self, short_code: str) -> Optional[URLMapping]:
        """Get a cached mapping.

        Returns:
            The mapping with visits set to 0 (counts are not cached), or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            raw = await self.client.get(self.get_cache_key(short_code))
        except RedisError as e:
            self.logger.error(f"Cache get error: {e}")
            return None

        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            expires_at = entry["expires_at"]
            return URLMapping(
                id=int(entry["id"]),
                short_code=short_code,
                long_url=entry["long_url"],
                owner_id=int(entry["owner_id"]),
                created_at=datetime.fromisoformat(entry["created_at"]),
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            )
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Dropping malformed cache entry for {short_code}: {e}")
            await self.delete_mapping(short_code)
            return None

    async def set_mapping(self, mapping: URLMapping) -> bool:
        """Cache a mapping, never past its expiry.

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        ttl = self.ttl_for(mapping.expires_at)
        if ttl <= 0:
            return False

        value = json.dumps({
            "id": mapping.id,
            "long_url": mapping.long_url,
            "owner_id": mapping.owner_id,
            "created_at": mapping.created_at.isoformat(),
            "expires_at": mapping.expires_at.isoformat() if mapping.expires_at else None,
        })

        try:
            await self.client.setex(self.get_cache_key(mapping.short_code), ttl, value)
            return True
        except RedisError as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def delete_mapping(self, short_code: str) -> bool:
        """Delete a cached entry.

        Returns:
            True if deleted
        """
        if not self.enabled or not self.client:
            return False

        try:
            result = await self.client.delete(self.get_cache_key(short_code))
            return result > 0
        except RedisError as e:
            self.logger.error(f"Cache delete error: {e}")
            return False

    async def ping(self) -> bool:
        """Check that Redis answers."""
        if not self.enabled or not self.client:
            return False
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            self.logger.error(f"Cache ping error: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")

    def ttl_for(self, expires_at: Optional[datetime], now: Optional[datetime] = None) -> int:
        """Seconds to keep an entry: the default TTL, capped by the mapping expiry."""
        if expires_at is None:
            return self.ttl_seconds
        now = now or datetime.now(timezone.utc)
        remaining = int((expires_at - now).total_seconds())
        return min(self.ttl_seconds, remaining)

    def get_cache_key(self, short_code: str) -> str:
        """Generate cache key for short code."""
        return f"url:shortener:{short_code}"
