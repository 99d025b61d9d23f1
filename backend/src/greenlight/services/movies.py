"""Movie persistence with optimistic concurrency and deadline-bound queries."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Protocol

import psycopg
from psycopg import Connection, Cursor
from psycopg.errors import QueryCanceled
from psycopg_pool import PoolTimeout

from greenlight.contracts.movie import Movie
from greenlight.errors import EditConflictError, RecordNotFoundError, StorageError
from greenlight.logging_config import get_logger
from greenlight.services.deadline import Deadline

logger = get_logger(__name__)

DEFAULT_READ_TIMEOUT = 3.0
DEFAULT_WRITE_TIMEOUT = 3.0

INSERT_MOVIE = """
    INSERT INTO movies (title, year, runtime, genres)
    VALUES (%s, %s, %s, %s)
    RETURNING id, created_at, version"""

SELECT_MOVIE = """
    SELECT id, created_at, title, year, runtime, genres, version
    FROM movies
    WHERE id = %s"""

UPDATE_MOVIE = """
    UPDATE movies
    SET title = %s, year = %s, runtime = %s, genres = %s, version = version + 1
    WHERE id = %s AND version = %s
    RETURNING version"""

DELETE_MOVIE = """
    DELETE FROM movies
    WHERE id = %s"""

# Transaction-local, so it never leaks to the next user of the connection.
SET_STATEMENT_TIMEOUT = "SELECT set_config('statement_timeout', %s, true)"


class MovieStore(Protocol):
    """Operations every movie store supports."""

    def insert(self, movie: Movie, *, deadline: Deadline | None = None) -> Movie: ...
    def get(self, movie_id: int, *, deadline: Deadline | None = None) -> Movie: ...
    def update(self, movie: Movie, *, deadline: Deadline | None = None) -> int: ...
    def delete(self, movie_id: int, *, deadline: Deadline | None = None) -> None: ...


class ConnectionSource(Protocol):
    """Anything that lends out a connection for a bounded wait."""

    def connection(self, timeout: float) -> AbstractContextManager[Connection]: ...


def require_valid_id(movie_id: int) -> None:
    """Ids below 1 are never resolvable; reject them without touching storage."""
    if movie_id < 1:
        raise RecordNotFoundError(context={"movie_id": movie_id})


def movie_from_row(row: tuple[Any, ...]) -> Movie:
    movie_id, created_at, title, year, runtime, genres, version = row
    return Movie(
        id=movie_id,
        created_at=created_at,
        title=title,
        year=year,
        runtime=runtime,
        genres=list(genres) if genres is not None else None,
        version=version,
    )


class PostgresMovieStore:
    """MovieStore backed by PostgreSQL through a bounded connection pool.

    Every call runs under a Deadline. The pool checkout waits at most the
    remaining budget and the statement runs with a matching
    ``statement_timeout``, so the server cancels work that overruns.
    Nothing is retried.
    """

    def __init__(
        self,
        pool: ConnectionSource,
        *,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    ) -> None:
        self._pool = pool
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    def insert(self, movie: Movie, *, deadline: Deadline | None = None) -> Movie:
        """Persist ``movie`` and echo id, created_at and version back into it."""
        deadline = deadline or Deadline(self.write_timeout)
        args = (movie.title, movie.year, movie.runtime, list(movie.genres or []))
        with self._cursor("insert", deadline) as cur:
            cur.execute(INSERT_MOVIE, args)
            row = cur.fetchone()
        if row is None:
            raise StorageError("insert returned no generated values", context={"operation": "insert"})
        movie.id, movie.created_at, movie.version = row
        logger.info("movie_inserted", movie_id=movie.id, version=movie.version)
        return movie

    def get(self, movie_id: int, *, deadline: Deadline | None = None) -> Movie:
        require_valid_id(movie_id)
        deadline = deadline or Deadline(self.read_timeout)
        with self._cursor("get", deadline) as cur:
            cur.execute(SELECT_MOVIE, (movie_id,))
            row = cur.fetchone()
        if row is None:
            raise RecordNotFoundError(context={"movie_id": movie_id})
        return movie_from_row(row)

    def update(self, movie: Movie, *, deadline: Deadline | None = None) -> int:
        """Conditionally overwrite ``movie``; returns and stores the new version.

        Zero matched rows means the version moved on or the row is gone. Both
        are reported as EditConflictError; a follow-up read to tell them apart
        would race with the next writer.
        """
        deadline = deadline or Deadline(self.write_timeout)
        args = (
            movie.title,
            movie.year,
            movie.runtime,
            list(movie.genres or []),
            movie.id,
            movie.version,
        )
        with self._cursor("update", deadline) as cur:
            cur.execute(UPDATE_MOVIE, args)
            row = cur.fetchone()
        if row is None:
            logger.warning("movie_edit_conflict", movie_id=movie.id, expected_version=movie.version)
            raise EditConflictError(
                context={"movie_id": movie.id, "expected_version": movie.version},
            )
        from_version = movie.version
        movie.version = row[0]
        logger.info("movie_updated", movie_id=movie.id,
                    from_version=from_version, to_version=movie.version)
        return movie.version

    def delete(self, movie_id: int, *, deadline: Deadline | None = None) -> None:
        require_valid_id(movie_id)
        deadline = deadline or Deadline(self.write_timeout)
        with self._cursor("delete", deadline) as cur:
            cur.execute(DELETE_MOVIE, (movie_id,))
            rows_affected = cur.rowcount
        if rows_affected == 0:
            raise RecordNotFoundError(context={"movie_id": movie_id})
        logger.info("movie_deleted", movie_id=movie_id)

    @contextmanager
    def _cursor(self, operation: str, deadline: Deadline) -> Generator[Cursor[Any], None, None]:
        """Cursor inside a transaction bounded by ``deadline``.

        Driver failures are translated here: checkout and statement timeouts
        become DeadlineExceededError, everything else StorageError.
        """
        deadline.check(operation)
        try:
            with self._pool.connection(timeout=deadline.remaining()) as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        budget_ms = max(1, int(deadline.remaining() * 1000))
                        cur.execute(SET_STATEMENT_TIMEOUT, (f"{budget_ms}ms",))
                        yield cur
        except (PoolTimeout, QueryCanceled) as e:
            logger.warning("movie_query_deadline_exceeded", operation=operation, timeout=deadline.timeout)
            raise deadline.exceeded(operation) from e
        except psycopg.Error as e:
            logger.error("movie_query_failed", operation=operation, error_type=type(e).__name__)
            raise StorageError(
                f"{operation} failed: {type(e).__name__}",
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e
