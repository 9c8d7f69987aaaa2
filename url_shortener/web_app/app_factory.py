"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router
from .errors import register_exception_handlers
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware
from ..config import Config
from ..lib.auth import AuthService
from ..lib.database.base import URLShortenerDBBase
from ..lib.database.cache import RedisCache
from ..lib.service import URLShortenerService
from ..lib.shortcode import ShortCodeGenerator
from ..lib.stats import StatsService


def attach_services(
    app: FastAPI,
    db: URLShortenerDBBase,
    cache: Optional[RedisCache],
    config: Config,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Build the service layer on top of db/cache and expose it on app.state."""
    generator = ShortCodeGenerator(default_length=config.short_code_length)

    app.state.db = db
    app.state.cache = cache
    app.state.service = URLShortenerService(
        db=db,
        cache=cache,
        short_code_generator=generator,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
        max_code_length_growth=config.short_code_max_growth,
    )
    app.state.auth_service = AuthService(db=db, bcrypt_rounds=config.bcrypt_rounds, logger=logger)
    app.state.stats_service = StatsService(db=db, logger=logger)


def create_app(
    config: Config,
    db_instance: Optional[URLShortenerDBBase] = None,
    cache_instance: Optional[RedisCache] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    When db_instance is None the services are attached later (see the
    lifespan in app.py).

    Args:
        config: Configuration instance
        db_instance: Database instance
        cache_instance: Cache instance
        logger: Logger handed to the services

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service with per-user statistics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.config = config
    app.state.logger = logger or logging.getLogger("url_shortener")
    if db_instance is not None:
        attach_services(app, db_instance, cache_instance, config, logger)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: forwarded headers are resolved before logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ForwardedHeadersMiddleware)

    app.include_router(api_router, prefix="/api")
    app.include_router(web_router, tags=["Web"])

    return app
