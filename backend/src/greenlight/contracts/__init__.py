"""Record contracts."""

from greenlight.contracts.movie import Movie

__all__ = ["Movie"]
