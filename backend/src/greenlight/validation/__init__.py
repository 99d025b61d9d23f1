"""Record validation."""

from greenlight.validation.movie import ensure_valid_movie, validate_movie
from greenlight.validation.validator import Validator, unique

__all__ = ["Validator", "ensure_valid_movie", "unique", "validate_movie"]
