#!/usr/bin/env python3
"""
Service entry point: builds the app from the environment and runs uvicorn.

One process serves many concurrent requests on its event loop. WORKERS > 1
starts that many processes, each with its own connection pool; the in-memory
store is not shared between them, so set DATABASE_URL when scaling out.

Usage:
    url-shortener
    python -m url_shortener.app

See url_shortener/config.py for every setting (DATABASE_URL, REDIS_URL,
BASE_URL, PORT, WORKERS, LOG_LEVEL, ...).
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Tuple

import uvicorn
from fastapi import FastAPI

from .config import Config, load_config
from .lib.database.base import URLShortenerDBBase
from .lib.database.memory import URLShortenerMemoryDB
from .lib.database.postgres import URLShortenerPostgresDB
from .lib.database.cache import RedisCache
from .lib.common.logging_config import setup_logging
from .web_app import create_app, attach_services


def create_database(config: Config, logger) -> URLShortenerDBBase:
    """Pick the store from configuration."""
    if config.database_url:
        logger.info("Using PostgreSQL store")
        return URLShortenerPostgresDB(
            db_config=config.database_url,
            pool_max_size=config.database_pool_max_size,
            create_tables=config.database_create_tables,
            logger=logger,
        )

    logger.warning("DATABASE_URL not set - using in-memory store, data is lost on restart")
    return URLShortenerMemoryDB(logger=logger)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store and cache, wire the services, close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    db = create_database(config, logger)
    if isinstance(db, URLShortenerPostgresDB):
        await db.initialize()

    cache = None
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("REDIS_URL not set - resolving without cache")

    attach_services(app, db, cache, config, logger)
    logger.info("URL shortener ready")

    try:
        yield
    finally:
        logger.info("Closing store and cache connections")
        await app.state.service.close()


def _configure() -> Tuple[Config, logging.Logger]:
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    return config, logger


def build_app() -> FastAPI:
    """App factory for uvicorn (also used by every worker process)."""
    config, logger = _configure()
    app = create_app(config=config, logger=logger)
    app.router.lifespan_context = lifespan
    return app


def main():
    config, logger = _configure()
    logger.info(f"Settings: {config.safe_dump()}")

    if config.workers > 1:
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "url_shortener.app:build_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
        )
        return

    server = uvicorn.Server(
        uvicorn.Config(
            build_app(),
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
        )
    )

    def request_shutdown(signum, frame):
        logger.info(f"Signal {signum} received, stopping")
        server.should_exit = True

    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, request_shutdown)

    logger.info(f"Listening on {config.host}:{config.port}")
    try:
        server.run()
    except (OSError, RuntimeError) as e:
        logger.error(f"Server stopped with an error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
