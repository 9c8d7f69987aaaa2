"""Tests for unique short code resolution."""

from datetime import datetime, timezone

import pytest

from url_shortener.lib.database.memory import URLShortenerMemoryDB
from url_shortener.lib.exceptions import ShortCodeConflictError, ShortCodeExhaustedError
from url_shortener.lib.resolver import UniqueCodeResolver
from url_shortener.lib.shortcode import ShortCodeGenerator

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class ShortCodesTakenDB(URLShortenerMemoryDB):
    """Reports every code shorter than free_from_length as taken."""

    def __init__(self, free_from_length: int, **kwargs):
        super().__init__(**kwargs)
        self.free_from_length = free_from_length
        self.checked = []

    async def short_code_exists(self, short_code: str) -> bool:
        self.checked.append(short_code)
        return len(short_code) < self.free_from_length


class ReservedHashGenerator(ShortCodeGenerator):
    def generate_from_url(self, url, length=None):
        return "admin"


@pytest.mark.asyncio
class TestUniqueCodeResolver:
    """Test collision handling."""

    async def test_returns_free_code(self, test_db, short_code_generator):
        resolver = UniqueCodeResolver(test_db, short_code_generator)
        code = await resolver.resolve_unique_code()

        assert len(code) == 6
        assert not await test_db.short_code_exists(code)

    async def test_first_candidate_is_url_hash(self, test_db, short_code_generator):
        resolver = UniqueCodeResolver(test_db, short_code_generator)
        url = "https://example.com/page"

        code = await resolver.resolve_unique_code(long_url=url)

        assert code == short_code_generator.generate_from_url(url)

    async def test_taken_url_hash_falls_back_to_random(self, test_db, short_code_generator):
        url = "https://example.com/page"
        hashed = short_code_generator.generate_from_url(url)
        await test_db.create_url_mapping(hashed, url, owner_id=1, created_at=FIXED_NOW)

        resolver = UniqueCodeResolver(test_db, short_code_generator)
        code = await resolver.resolve_unique_code(long_url=url)

        assert code != hashed
        assert len(code) == 6

    async def test_never_returns_preexisting_code(self):
        """A one-character alphabet space fills up; the resolver must skip used codes."""
        db = URLShortenerMemoryDB()
        generator = ShortCodeGenerator(default_length=1)
        for char in ShortCodeGenerator.BASE62_CHARS[:50]:
            await db.create_url_mapping(char, "https://example.com", owner_id=1, created_at=FIXED_NOW)

        resolver = UniqueCodeResolver(db, generator, max_attempts=5, max_length_growth=3)
        for _ in range(20):
            code = await resolver.resolve_unique_code()
            assert not await db.short_code_exists(code)

    async def test_reserved_words_are_skipped(self, test_db):
        resolver = UniqueCodeResolver(test_db, ReservedHashGenerator(default_length=5))
        code = await resolver.resolve_unique_code(long_url="https://example.com")

        assert code != "admin"
        assert len(code) == 5

    async def test_widens_code_after_failed_round(self):
        db = ShortCodesTakenDB(free_from_length=8)
        resolver = UniqueCodeResolver(db, ShortCodeGenerator(6), max_attempts=3, max_length_growth=2)

        code = await resolver.resolve_unique_code()

        assert len(code) == 8
        # Three candidates at length 6, three at 7, then the first at 8 is free
        assert [len(c) for c in db.checked] == [6, 6, 6, 7, 7, 7, 8]

    async def test_exhausted_raises(self):
        db = ShortCodesTakenDB(free_from_length=100)
        resolver = UniqueCodeResolver(db, ShortCodeGenerator(6), max_attempts=2, max_length_growth=1)

        with pytest.raises(ShortCodeExhaustedError):
            await resolver.resolve_unique_code()

        assert len(db.checked) == 4

    async def test_invalid_max_attempts(self, test_db):
        with pytest.raises(ValueError):
            UniqueCodeResolver(test_db, max_attempts=0)

    async def test_persist_retries_on_conflict(self, test_db, short_code_generator):
        resolver = UniqueCodeResolver(test_db, short_code_generator, max_attempts=3)
        attempts = []

        async def write(code):
            attempts.append(code)
            if len(attempts) == 1:
                raise ShortCodeConflictError("taken")
            return code

        result = await resolver.persist_with_unique_code(write)

        assert len(attempts) == 2
        assert result == attempts[1]

    async def test_persist_gives_up_after_max_attempts(self, test_db, short_code_generator):
        resolver = UniqueCodeResolver(test_db, short_code_generator, max_attempts=3)
        attempts = []

        async def write(code):
            attempts.append(code)
            raise ShortCodeConflictError("taken")

        with pytest.raises(ShortCodeExhaustedError):
            await resolver.persist_with_unique_code(write)

        assert len(attempts) == 3
