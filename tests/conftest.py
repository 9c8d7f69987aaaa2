"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport

from url_shortener.config import Config
from url_shortener.lib.database.memory import URLShortenerMemoryDB
from url_shortener.lib.database.models import Principal
from url_shortener.lib.expiry import ExpiryPolicy
from url_shortener.lib.service import URLShortenerService
from url_shortener.lib.shortcode import ShortCodeGenerator
from url_shortener.lib.stats import StatsService
from url_shortener.lib.common.logging_config import setup_logging
from url_shortener.web_app import create_app

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def test_db(logger) -> AsyncGenerator[URLShortenerMemoryDB, None]:
    """Create test database instance."""
    db = URLShortenerMemoryDB(logger=logger)

    yield db

    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def expiry_policy(clock):
    return ExpiryPolicy(clock=clock)


@pytest.fixture
def service(test_db, short_code_generator, expiry_policy, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        db=test_db,
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
        expiry_policy=expiry_policy,
    )


@pytest.fixture
def stats_service(test_db, expiry_policy, logger) -> StatsService:
    return StatsService(db=test_db, expiry_policy=expiry_policy, logger=logger)


@pytest.fixture
def alice():
    return Principal(id=1, login="alice")


@pytest.fixture
def bob():
    return Principal(id=2, login="bob")


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://www.example.com",
        "https://github.com/user/repo",
        "https://docs.python.org/3/library/asyncio.html",
        "http://localhost:8080/test",
        "https://example.com/path?query=value&foo=bar",
    ]


@pytest.fixture
def app(test_db, logger):
    """Create test FastAPI app backed by the in-memory store."""
    config = Config(
        base_url="http://testserver",
        bcrypt_rounds=4,
    )

    return create_app(config=config, db_instance=test_db, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def credentials():
    return {"login": "alice", "email": "alice@example.com", "password": "Secret123"}


@pytest.fixture
async def registered_user(client, credentials):
    """Register the default user through the API."""
    response = await client.post("/api/v1/auth/register", json=credentials)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth(credentials):
    """HTTP Basic credentials of the default user."""
    return (credentials["login"], credentials["password"])
