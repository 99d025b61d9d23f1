"""Tests for Pydantic Settings configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from greenlight.config import Settings, get_settings, parse_duration
from greenlight.errors import ConfigurationError

_ENV_KEYS = [
    "ENV",
    "GREENLIGHT_DB_DSN",
    "DB_DSN",
    "DB_MAX_OPEN_CONNS",
    "DB_MAX_IDLE_CONNS",
    "DB_MIN_CONNS",
    "DB_MAX_IDLE_TIME",
    "DB_MAX_CONN_LIFETIME",
    "DB_NETWORK_TIMEOUT",
    "DB_CONNECT_TIMEOUT",
    "DB_READ_TIMEOUT",
    "DB_WRITE_TIMEOUT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env():
    """Run every test without greenlight variables from the outer environment."""
    get_settings.cache_clear()
    saved = {key: os.environ.pop(key) for key in _ENV_KEYS if key in os.environ}
    yield
    os.environ.update(saved)
    get_settings.cache_clear()


class TestSettingsDefaults:
    """Test Settings with no environment variables (default values)."""

    def test_all_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.env == "development"
        assert settings.db_dsn is None
        assert settings.db_max_open_conns == 25
        assert settings.db_max_idle_conns == 25
        assert settings.db_min_conns == 0
        assert settings.db_max_conn_lifetime == 3600.0
        assert settings.db_network_timeout == 10.0
        assert settings.db_max_idle_time == 900.0
        assert settings.db_connect_timeout == 5.0
        assert settings.db_read_timeout == 3.0
        assert settings.db_write_timeout == 3.0
        assert settings.log_level == "INFO"

    def test_to_dict(self):
        config_dict = Settings(_env_file=None).to_dict()

        assert set(config_dict) == {
            "env",
            "db_dsn",
            "db_max_open_conns",
            "db_max_idle_conns",
            "db_min_conns",
            "db_max_idle_time",
            "db_max_conn_lifetime",
            "db_connect_timeout",
            "db_network_timeout",
            "db_read_timeout",
            "db_write_timeout",
            "log_level",
        }


class TestSettingsEnvOverrides:
    """Test Settings with environment variable overrides."""

    def test_dsn_from_greenlight_variable(self):
        with patch.dict(os.environ, {"GREENLIGHT_DB_DSN": "postgres://greenlight@localhost/greenlight"}):
            settings = Settings(_env_file=None)
            assert settings.db_dsn == "postgres://greenlight@localhost/greenlight"

    def test_dsn_from_short_variable(self):
        with patch.dict(os.environ, {"DB_DSN": "postgres://other@localhost/db"}):
            assert Settings(_env_file=None).db_dsn == "postgres://other@localhost/db"

    def test_pool_tunables(self):
        with patch.dict(
            os.environ,
            {
                "DB_MAX_OPEN_CONNS": "50",
                "DB_MAX_IDLE_CONNS": "10",
                "DB_MAX_IDLE_TIME": "5m",
                "DB_READ_TIMEOUT": "500ms",
            },
        ):
            settings = Settings(_env_file=None)
            assert settings.db_max_open_conns == 50
            assert settings.db_max_idle_conns == 10
            assert settings.db_max_idle_time == 300.0
            assert settings.db_read_timeout == pytest.approx(0.5)

    def test_env_value(self):
        with patch.dict(os.environ, {"ENV": "production"}):
            assert Settings(_env_file=None).env == "production"


class TestSettingsValidation:
    """Test Settings validation error handling."""

    def test_rejects_unknown_env(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, env="qa")

    def test_rejects_zero_open_conns(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, db_max_open_conns=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, db_read_timeout=0)

    def test_rejects_bad_duration(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, db_max_idle_time="fifteen minutes")

    def test_rejects_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="INVALID")

    def test_log_level_case_insensitive(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_extra_env_vars_ignored(self):
        with patch.dict(os.environ, {"RANDOM_VAR": "should_be_ignored"}):
            settings = Settings(_env_file=None)
            assert hasattr(settings, "random_var") is False


@pytest.mark.parametrize(
    "value, seconds",
    [
        (3, 3.0),
        (1.5, 1.5),
        ("2", 2.0),
        ("3s", 3.0),
        ("500ms", 0.5),
        ("15m", 900.0),
        ("1h30m", 5400.0),
        ("1.5s", 1.5),
    ],
)
def test_parse_duration(value, seconds):
    assert parse_duration(value) == pytest.approx(seconds)


@pytest.mark.parametrize("value", ["", "15x", "m15", "15m junk", None, True])
def test_parse_duration_rejects(value):
    with pytest.raises(ValueError):
        parse_duration(value)


class TestPoolConfig:

    def test_pool_config_from_settings(self):
        settings = Settings(
            _env_file=None,
            db_dsn="postgres://localhost/greenlight",
            db_max_open_conns=10,
            db_max_idle_conns=4,
            db_max_idle_time="1m",
        )
        config = settings.pool_config()

        assert config.dsn == "postgres://localhost/greenlight"
        assert config.max_open_conns == 10
        assert config.max_idle_conns == 4
        assert config.max_idle_time == 60.0
        assert config.connect_timeout == 5.0
        assert config.min_conns == 0
        assert config.max_lifetime == 3600.0
        assert config.network_timeout == 10.0
        assert config.warm_size < config.max_open_conns

    def test_pool_config_requires_dsn(self):
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None).pool_config()


class TestGetSettingsFunction:

    def test_returns_singleton(self):
        assert get_settings() is get_settings()

    def test_cache_can_be_cleared(self):
        settings1 = get_settings()
        get_settings.cache_clear()
        assert get_settings() is not settings1
