"""greenlight - movie data-access layer with optimistic concurrency."""

__version__ = "1.0.0"
