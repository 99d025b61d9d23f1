"""Dependency injection helpers."""

from __future__ import annotations

from greenlight.config import Settings, get_settings
from greenlight.errors import StorageError
from greenlight.logging_config import get_logger
from greenlight.registry import Models
from greenlight.services.memory_movies import InMemoryMovieStore
from greenlight.services.movies import PostgresMovieStore
from greenlight.services.pool import DatabasePool

logger = get_logger(__name__)


def create_database_pool(settings: Settings | None = None) -> DatabasePool:
    """Open the connection pool; failure is fatal to startup and re-raised."""
    _settings = settings or get_settings()
    pool = DatabasePool(_settings.pool_config())
    try:
        pool.open()
    except StorageError as e:
        logger.critical("database_pool_unavailable", code=e.code, **e.context)
        raise
    logger.info("database connection pool established", env=_settings.env)
    return pool


def create_models(pool: DatabasePool, settings: Settings | None = None) -> Models:
    """Create the PostgreSQL-backed registry."""
    _settings = settings or get_settings()
    return Models(
        movies=PostgresMovieStore(
            pool,
            read_timeout=_settings.db_read_timeout,
            write_timeout=_settings.db_write_timeout,
        ),
    )


def create_mock_models(
    read_timeout: float = 3.0,
    write_timeout: float = 3.0,
    latency: float = 0.0,
) -> Models:
    """Create a registry whose stores keep records in memory."""
    return Models(
        movies=InMemoryMovieStore(
            read_timeout=read_timeout,
            write_timeout=write_timeout,
            latency=latency,
        ),
    )
