"""Model registry: the narrow seam HTTP handlers depend on."""

from __future__ import annotations

from dataclasses import dataclass

from greenlight.services.movies import MovieStore


@dataclass(frozen=True)
class Models:
    """Aggregates the stores handlers may call.

    Handlers only see the MovieStore protocol, so a registry built around
    InMemoryMovieStore substitutes for the PostgreSQL one in tests.
    """

    movies: MovieStore
