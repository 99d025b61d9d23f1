"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import date

import pytest

import greenlight.logging_config as logging_config_module
from greenlight.contracts.movie import Movie
from greenlight.logging_config import configure_logging


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure structlog once per session.

    cache_logger_on_first_use=False keeps tests isolated.
    """
    configure_logging(log_level="DEBUG")


@pytest.fixture(autouse=True)
def reset_logging_config() -> None:
    """Reset logging config state before each test for isolation."""
    logging_config_module._CONFIGURED = False


@pytest.fixture
def movie() -> Movie:
    """A movie that satisfies every field invariant."""
    return Movie(
        title="Moana",
        year=2016,
        runtime=107,
        genres=["animation", "adventure"],
    )


@pytest.fixture
def this_year() -> int:
    return date.today().year
