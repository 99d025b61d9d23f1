"""Services package - storage abstractions for the data layer."""

from greenlight.services.deadline import Deadline
from greenlight.services.memory_movies import InMemoryMovieStore
from greenlight.services.movies import MovieStore, PostgresMovieStore
from greenlight.services.pool import DatabasePool, PoolConfig

__all__ = [
    "DatabasePool",
    "Deadline",
    "InMemoryMovieStore",
    "MovieStore",
    "PoolConfig",
    "PostgresMovieStore",
]
