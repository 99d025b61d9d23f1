"""In-memory movie store with the same contract as the PostgreSQL one."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

from greenlight.contracts.movie import Movie
from greenlight.errors import EditConflictError, RecordNotFoundError
from greenlight.services.deadline import Deadline
from greenlight.services.movies import (
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    require_valid_id,
)


class InMemoryMovieStore:
    """Thread-safe MovieStore holding records in a dict.

    ``calls`` records each simulated backend round-trip so tests can assert
    that a call never reached storage. ``latency`` delays every round-trip;
    a delay longer than the remaining deadline waits out the budget and
    fails with DeadlineExceededError.
    """

    def __init__(
        self,
        *,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
        latency: float = 0.0,
    ) -> None:
        if latency < 0:
            raise ValueError("latency must be >= 0")
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.latency = latency
        self.calls: list[str] = []
        self._rows: dict[int, Movie] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def insert(self, movie: Movie, *, deadline: Deadline | None = None) -> Movie:
        self._round_trip("insert", deadline or Deadline(self.write_timeout))
        with self._lock:
            movie.id = self._next_id
            self._next_id += 1
            movie.created_at = datetime.now(timezone.utc)
            movie.version = 1
            self._rows[movie.id] = movie.model_copy(deep=True)
        return movie

    def get(self, movie_id: int, *, deadline: Deadline | None = None) -> Movie:
        require_valid_id(movie_id)
        self._round_trip("get", deadline or Deadline(self.read_timeout))
        with self._lock:
            stored = self._rows.get(movie_id)
            if stored is None:
                raise RecordNotFoundError(context={"movie_id": movie_id})
            return stored.model_copy(deep=True)

    def update(self, movie: Movie, *, deadline: Deadline | None = None) -> int:
        self._round_trip("update", deadline or Deadline(self.write_timeout))
        with self._lock:
            stored = self._rows.get(movie.id)
            if stored is None or stored.version != movie.version:
                raise EditConflictError(
                    context={"movie_id": movie.id, "expected_version": movie.version},
                )
            new_version = stored.version + 1
            self._rows[movie.id] = stored.model_copy(
                update={
                    "title": movie.title,
                    "year": movie.year,
                    "runtime": movie.runtime,
                    "genres": list(movie.genres or []),
                    "version": new_version,
                },
                deep=True,
            )
        movie.version = new_version
        return new_version

    def delete(self, movie_id: int, *, deadline: Deadline | None = None) -> None:
        require_valid_id(movie_id)
        self._round_trip("delete", deadline or Deadline(self.write_timeout))
        with self._lock:
            if self._rows.pop(movie_id, None) is None:
                raise RecordNotFoundError(context={"movie_id": movie_id})

    def _round_trip(self, operation: str, deadline: Deadline) -> None:
        deadline.check(operation)
        with self._lock:
            self.calls.append(operation)
        if self.latency:
            remaining = deadline.remaining()
            if self.latency > remaining:
                time.sleep(remaining)
                raise deadline.exceeded(operation)
            time.sleep(self.latency)
