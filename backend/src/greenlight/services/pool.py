"""Bounded PostgreSQL connection pool shared by the stores."""

from __future__ import annotations

import math
import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Callable, Dict

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool, PoolTimeout
from pydantic import BaseModel, Field

from greenlight.errors import DeadlineExceededError, StorageError
from greenlight.logging_config import get_logger

logger = get_logger(__name__)


class PoolConfig(BaseModel):
    """Configuration for the connection pool."""
    dsn: str
    max_open_conns: int = Field(default=25, ge=1)
    max_idle_conns: int = Field(default=25, ge=0)
    min_conns: int = Field(default=0, ge=0)
    max_idle_time: float = Field(default=900.0, gt=0)  # seconds
    max_lifetime: float = Field(default=3600.0, gt=0)  # seconds
    connect_timeout: float = Field(default=5.0, gt=0)
    network_timeout: float = Field(default=10.0, gt=0)  # seconds

    @property
    def warm_size(self) -> int:
        """Connections psycopg_pool keeps open while idle.

        psycopg_pool only retires idle connections above this floor, so it
        stays below max_open_conns whenever the pool can hold more than one
        connection. max_idle_conns caps it; psycopg_pool has no cap on         idle count itself.
        """
        floor = min(self.min_conns, self.max_idle_conns)
        return min(floor, max(self.max_open_conns - 1, 0))

    def connect_kwargs(self) -> dict[str, int]:
        """libpq options bounding socket stalls on a dead network path.

        tcp_user_timeout fails a write the peer never acknowledges;
        keepalive checks fail a read on a connection that went silent.
        Both give up after roughly network_timeout seconds.
        """
        seconds = max(1, math.ceil(self.network_timeout))
        attempts = 3
        return {
            "connect_timeout": max(2, math.ceil(self.connect_timeout)),
            "tcp_user_timeout": int(self.network_timeout * 1000),
            "keepalives": 1,
            "keepalives_idle": max(1, seconds // 2),
            "keepalives_interval": max(1, seconds // (2 * attempts)),
            "keepalives_count": attempts,
        }


class DatabasePool:
    """psycopg_pool wrapper with a startup ping and deadline-aware checkout.

    max_open_conns bounds the pool size. Connections idle longer than
    max_idle_time above the warm floor are closed, and every connection is
    replaced after max_lifetime, so stale connections are recycled even at
    the floor. Startup opens only the warm floor and pings one connection.
    """

    def __init__(
        self,
        config: PoolConfig,
        *,
        pool_factory: Callable[..., ConnectionPool] = ConnectionPool,
    ) -> None:
        self.config = config
        self._pool_factory = pool_factory
        self._pool: ConnectionPool | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._pool is not None

    def open(self) -> None:
        """Open the pool and ping it within connect_timeout. Idempotent.

        Raises DeadlineExceededError if the backend is not reachable in time,
        StorageError for any other failure; both are fatal at startup.
        """
        with self._lock:
            if self._pool is not None:
                return
            pool = self._pool_factory(
                conninfo=self.config.dsn,
                min_size=self.config.warm_size,
                max_size=self.config.max_open_conns,
                max_idle=self.config.max_idle_time,
                max_lifetime=self.config.max_lifetime,
                kwargs=self.config.connect_kwargs(),
                open=False,
                name="greenlight",
            )
            try:
                pool.open(wait=True, timeout=self.config.connect_timeout)
                with pool.connection(timeout=self.config.connect_timeout) as conn:
                    conn.execute("SELECT 1")
            except PoolTimeout as e:
                pool.close()
                raise DeadlineExceededError(
                    "database ping exceeded connect timeout",
                    operation="ping",
                    timeout=self.config.connect_timeout,
                ) from e
            except psycopg.Error as e:
                pool.close()
                raise StorageError(
                    "unable to open database connection pool",
                    context={"error_type": type(e).__name__},
                ) from e
            self._pool = pool

        logger.info(
            "database_pool_opened",
            max_open_conns=self.config.max_open_conns,
            max_idle_conns=self.config.max_idle_conns,
            max_idle_time=self.config.max_idle_time,
            warm_size=self.config.warm_size,
            max_lifetime=self.config.max_lifetime,
        )

    @contextmanager
    def connection(self, timeout: float) -> Generator[Connection, None, None]:
        """Check out a connection, waiting at most ``timeout`` seconds.

        Committed on clean exit, rolled back on error, then returned to the pool.
        """
        with self._lock:
            pool = self._pool
        if pool is None:
            raise StorageError("database connection pool is not open", code="POOL_CLOSED")
        with pool.connection(timeout=timeout) as conn:
            yield conn

    def health_check(self) -> Dict[str, Any]:
        """Return pool health metrics."""
        with self._lock:
            pool = self._pool
        stats = pool.get_stats() if pool is not None else {}
        return {
            "state": "open" if pool is not None else "closed",
            "pool_size": stats.get("pool_size", 0),
            "pool_available": stats.get("pool_available", 0),
            "requests_waiting": stats.get("requests_waiting", 0),
            "requests_errors": stats.get("requests_errors", 0),
            "config": {
                "max_open_conns": self.config.max_open_conns,
                "max_idle_conns": self.config.max_idle_conns,
                "max_idle_time": self.config.max_idle_time,
                "warm_size": self.config.warm_size,
                "max_lifetime": self.config.max_lifetime,
            },
        }

    def close(self) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.close()
            logger.info("database_pool_closed")
