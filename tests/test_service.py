"""Tests for service layer."""

import asyncio
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock

from url_shortener.lib.database.cache import RedisCache
from url_shortener.lib.database.memory import URLShortenerMemoryDB
from url_shortener.lib.exceptions import (
    ResourceNotFoundError,
    UrlExpiredError,
    ValidationError,
)
from url_shortener.lib.service import URLShortenerService


@pytest.mark.asyncio
class TestURLShortenerService:
    """Test URL shortener service."""

    async def test_shorten(self, service, alice, sample_urls, clock):
        """Test creating short URL."""
        mapping = await service.shorten(alice, sample_urls[0])

        assert len(mapping.short_code) == 6
        assert mapping.long_url == sample_urls[0]
        assert mapping.owner_id == alice.id
        assert mapping.visits == 0
        assert mapping.created_at == clock.now
        assert mapping.expires_at is None

    async def test_shorten_same_url_twice_gives_two_codes(self, service, alice, sample_urls):
        first = await service.shorten(alice, sample_urls[0])
        second = await service.shorten(alice, sample_urls[0])

        assert first.short_code != second.short_code

    async def test_shorten_with_expiry(self, service, alice, sample_urls, clock):
        expires_at = clock.now + timedelta(days=1)
        mapping = await service.shorten(alice, sample_urls[0], expires_at)

        assert mapping.expires_at == expires_at

    async def test_shorten_with_past_expiry(self, service, alice, sample_urls, clock):
        with pytest.raises(ValidationError, match="future"):
            await service.shorten(alice, sample_urls[0], clock.now)

    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "https://", "https://x.com/" + "a" * 2000])
    async def test_shorten_invalid_url(self, service, alice, url):
        with pytest.raises(ValidationError):
            await service.shorten(alice, url)

    async def test_resolve_counts_visit(self, service, alice, sample_urls):
        """Test getting original URL."""
        created = await service.shorten(alice, sample_urls[0])

        first = await service.resolve(created.short_code)
        second = await service.resolve(created.short_code)

        assert first.long_url == sample_urls[0]
        assert first.visits == 1
        assert second.visits == 2

    async def test_resolve_nonexistent(self, service):
        with pytest.raises(ResourceNotFoundError):
            await service.resolve("nonexistent")

    async def test_resolve_malformed_code(self, service):
        with pytest.raises(ValidationError):
            await service.resolve("bad-code!")

    async def test_resolve_expired(self, service, alice, sample_urls, clock, test_db):
        created = await service.shorten(alice, sample_urls[0], clock.now + timedelta(minutes=5))
        clock.advance(minutes=5)

        with pytest.raises(UrlExpiredError):
            await service.resolve(created.short_code)

        # Expired resolutions are not counted
        assert (await test_db.get_url_mapping(created.short_code)).visits == 0

    async def test_expired_is_a_validation_error(self):
        assert issubclass(UrlExpiredError, ValidationError)
        assert UrlExpiredError.status_code == 400

    async def test_update_regenerates_code(self, service, alice, sample_urls, test_db):
        created = await service.shorten(alice, sample_urls[0])

        updated = await service.update(alice, created.short_code)

        assert updated.short_code != created.short_code
        assert updated.id == created.id
        assert updated.long_url == created.long_url
        assert await test_db.get_url_mapping(created.short_code) is None

    async def test_update_keeps_expiry_when_omitted(self, service, alice, sample_urls, clock):
        expires_at = clock.now + timedelta(days=1)
        created = await service.shorten(alice, sample_urls[0], expires_at)

        updated = await service.update(alice, created.short_code)

        assert updated.expires_at == expires_at

    async def test_update_replaces_expiry(self, service, alice, sample_urls, clock):
        created = await service.shorten(alice, sample_urls[0], clock.now + timedelta(days=1))
        new_expiry = clock.now + timedelta(days=7)

        updated = await service.update(alice, created.short_code, new_expiry)

        assert updated.expires_at == new_expiry

    async def test_update_past_expiry(self, service, alice, sample_urls, clock):
        created = await service.shorten(alice, sample_urls[0])

        with pytest.raises(ValidationError):
            await service.update(alice, created.short_code, clock.now - timedelta(days=1))

    async def test_update_keeps_visits(self, service, alice, sample_urls):
        created = await service.shorten(alice, sample_urls[0])
        await service.resolve(created.short_code)

        updated = await service.update(alice, created.short_code)

        assert updated.visits == 1

    async def test_update_not_owner(self, service, alice, bob, sample_urls):
        created = await service.shorten(alice, sample_urls[0])

        with pytest.raises(ResourceNotFoundError):
            await service.update(bob, created.short_code)

    async def test_delete(self, service, alice, sample_urls):
        created = await service.shorten(alice, sample_urls[0])

        await service.delete(alice, created.short_code)

        with pytest.raises(ResourceNotFoundError):
            await service.resolve(created.short_code)

    async def test_delete_not_owner(self, service, alice, bob, sample_urls, test_db):
        created = await service.shorten(alice, sample_urls[0])

        with pytest.raises(ResourceNotFoundError):
            await service.delete(bob, created.short_code)

        assert await test_db.get_url_mapping(created.short_code) is not None

    async def test_delete_nonexistent(self, service, alice):
        with pytest.raises(ResourceNotFoundError):
            await service.delete(alice, "missing")

    async def test_health_check(self, service):
        """Test health check."""
        health = await service.health_check()

        assert health == {"database": True, "cache": True, "overall": True}


@pytest.fixture
def cache(logger):
    cache = RedisCache(redis_url="redis://localhost:6379/0", logger=logger)
    cache.client = AsyncMock()
    cache.client.get.return_value = None
    cache.client.delete.return_value = 1
    return cache


@pytest.fixture
def cached_service(test_db, short_code_generator, expiry_policy, logger, cache):
    return URLShortenerService(
        db=test_db,
        cache=cache,
        short_code_generator=short_code_generator,
        logger=logger,
        expiry_policy=expiry_policy,
    )


@pytest.mark.asyncio
class TestURLShortenerServiceWithCache:
    """Cache interaction of the service."""

    async def test_shorten_populates_cache(self, cached_service, cache, alice, sample_urls):
        mapping = await cached_service.shorten(alice, sample_urls[0])

        key, ttl, _ = cache.client.setex.call_args.args
        assert key == cache.get_cache_key(mapping.short_code)
        assert ttl == cache.ttl_seconds

    async def test_resolve_from_cache_counts_in_store(self, cached_service, cache, alice, sample_urls, test_db):
        mapping = await cached_service.shorten(alice, sample_urls[0])
        cache.client.get.return_value = cache.client.setex.call_args.args[2]

        result = await cached_service.resolve(mapping.short_code)

        assert result.long_url == sample_urls[0]
        assert result.visits == 1
        assert (await test_db.get_url_mapping(mapping.short_code)).visits == 1

    async def test_resolve_stale_cache_entry_is_dropped(self, cached_service, cache, alice, sample_urls, test_db):
        mapping = await cached_service.shorten(alice, sample_urls[0])
        cache.client.get.return_value = cache.client.setex.call_args.args[2]
        await test_db.delete_url_mapping(mapping.id)

        with pytest.raises(ResourceNotFoundError):
            await cached_service.resolve(mapping.short_code)

        cache.client.delete.assert_awaited_with(cache.get_cache_key(mapping.short_code))

    async def test_delete_evicts_cache(self, cached_service, cache, alice, sample_urls):
        mapping = await cached_service.shorten(alice, sample_urls[0])

        await cached_service.delete(alice, mapping.short_code)

        cache.client.delete.assert_awaited_with(cache.get_cache_key(mapping.short_code))

    async def test_update_moves_cache_entry(self, cached_service, cache, alice, sample_urls):
        mapping = await cached_service.shorten(alice, sample_urls[0])

        updated = await cached_service.update(alice, mapping.short_code)

        cache.client.delete.assert_awaited_with(cache.get_cache_key(mapping.short_code))
        assert cache.client.setex.call_args.args[0] == cache.get_cache_key(updated.short_code)

    async def test_health_check_reports_cache(self, cached_service, cache):
        cache.client.ping.return_value = False

        health = await cached_service.health_check()

        assert health["cache"] is False
        assert health["overall"] is False


class PausedReadDB(URLShortenerMemoryDB):
    """Memory store that can hold one lookup open after it has read the row."""

    def __init__(self, logger=None):
        super().__init__(logger)
        self.pause = False
        self.read_done = asyncio.Event()
        self.resume = asyncio.Event()

    async def get_url_mapping(self, short_code):
        mapping = await super().get_url_mapping(short_code)
        if self.pause:
            self.pause = False
            self.read_done.set()
            await self.resume.wait()
        return mapping


def dict_backed_client():
    """AsyncMock Redis client whose get/setex/delete work on a plain dict."""
    store = {}
    client = AsyncMock()

    async def get(key):
        return store.get(key)

    async def setex(key, ttl, value):
        store[key] = value

    async def delete(key):
        return 1 if store.pop(key, None) is not None else 0

    client.get.side_effect = get
    client.setex.side_effect = setex
    client.delete.side_effect = delete
    return client, store


@pytest.fixture
async def paused_db(logger):
    return PausedReadDB(logger)


@pytest.fixture
def redis_store(cache):
    cache.client, store = dict_backed_client()
    return store


@pytest.fixture
def racing_service(paused_db, short_code_generator, expiry_policy, logger, cache, redis_store):
    return URLShortenerService(
        db=paused_db,
        cache=cache,
        short_code_generator=short_code_generator,
        logger=logger,
        expiry_policy=expiry_policy,
    )


@pytest.mark.asyncio
class TestOldCodeAfterUpdate:
    """A re-issued code must stop resolving even when the cache lags behind."""

    async def test_resolve_during_update(self, racing_service, paused_db, cache, redis_store, alice, sample_urls):
        mapping = await racing_service.shorten(alice, sample_urls[0])
        old_key = cache.get_cache_key(mapping.short_code)
        redis_store.clear()

        paused_db.pause = True
        lookup = asyncio.create_task(racing_service.resolve(mapping.short_code))
        await paused_db.read_done.wait()

        updated = await racing_service.update(alice, mapping.short_code)
        paused_db.resume.set()

        with pytest.raises(ResourceNotFoundError):
            await lookup

        assert old_key not in redis_store
        assert cache.get_cache_key(updated.short_code) in redis_store
        assert (await paused_db.get_url_mapping(updated.short_code)).visits == 0

        with pytest.raises(ResourceNotFoundError):
            await racing_service.resolve(mapping.short_code)

    async def test_entry_left_behind_by_failed_eviction(self, racing_service, cache, redis_store, alice, sample_urls):
        mapping = await racing_service.shorten(alice, sample_urls[0])
        old_key = cache.get_cache_key(mapping.short_code)
        old_entry = redis_store[old_key]

        updated = await racing_service.update(alice, mapping.short_code)
        redis_store[old_key] = old_entry

        with pytest.raises(ResourceNotFoundError):
            await racing_service.resolve(mapping.short_code)

        assert old_key not in redis_store
        assert (await racing_service.resolve(updated.short_code)).visits == 1
