"""Movie field invariants."""

from __future__ import annotations

from datetime import date

from greenlight.contracts.movie import Movie
from greenlight.errors import FailedValidationError
from greenlight.validation.validator import Validator, unique

MAX_TITLE_BYTES = 500
EARLIEST_YEAR = 1888
MAX_GENRES = 5


def validate_movie(v: Validator, movie: Movie, *, current_year: int | None = None) -> None:
    """Record every violated movie invariant on ``v``."""
    this_year = current_year if current_year is not None else date.today().year
    genres = movie.genres or []

    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= EARLIEST_YEAR, "year", "must be greater than 1888")
    v.check(movie.year <= this_year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    v.check(movie.genres is not None, "genres", "must be provided")
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")


def ensure_valid_movie(movie: Movie, *, current_year: int | None = None) -> None:
    """Raise FailedValidationError carrying all violations, if any."""
    v = Validator()
    validate_movie(v, movie, current_year=current_year)
    if not v.valid():
        raise FailedValidationError(v.errors, context={"movie_id": movie.id})
