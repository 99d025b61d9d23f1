"""Centralized configuration using pydantic-settings."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from greenlight.services.pool import PoolConfig

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Any) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) or Go-style strings such as "15m",
    "3s", "500ms" or "1h30m".
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid duration {value!r}")
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass
    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"Invalid duration '{value}'. Use e.g. '15m', '3s', '500ms'")
    return sum(float(n) * _DURATION_UNITS[u] for n, u in parts)


class Settings(BaseSettings):
    """Application settings from environment variables.

    Pool tunables default to the values the API server has always run
    with: 25 open, 25 idle, 15 minute idle lifetime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    env: Literal["development", "staging", "production"] = "development"

    db_dsn: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GREENLIGHT_DB_DSN", "DB_DSN", "db_dsn"),
    )

    # Pool configuration
    db_max_open_conns: int = Field(default=25, ge=1)
    db_max_idle_conns: int = Field(default=25, ge=0)
    db_min_conns: int = Field(default=0, ge=0)
    db_max_idle_time: float = Field(default=900.0, gt=0)
    db_max_conn_lifetime: float = Field(default=3600.0, gt=0)
    db_connect_timeout: float = Field(default=5.0, gt=0)
    db_network_timeout: float = Field(default=10.0, gt=0)

    # Per-operation deadlines
    db_read_timeout: float = Field(default=3.0, gt=0)
    db_write_timeout: float = Field(default=3.0, gt=0)

    log_level: str = "INFO"

    @field_validator(
        "db_max_idle_time",
        "db_max_conn_lifetime",
        "db_connect_timeout",
        "db_network_timeout",
        "db_read_timeout",
        "db_write_timeout",
        mode="before",
    )
    @classmethod
    def validate_duration(cls, v: Any) -> float:
        return parse_duration(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {', '.join(sorted(valid_levels))}")
        return upper

    def pool_config(self) -> PoolConfig:
        """Build the connection pool configuration from these settings."""
        from greenlight.errors import ConfigurationError
        from greenlight.services.pool import PoolConfig

        if not self.db_dsn:
            raise ConfigurationError(
                "GREENLIGHT_DB_DSN is not set",
                context={"setting": "db_dsn"},
            )
        return PoolConfig(
            dsn=self.db_dsn,
            max_open_conns=self.db_max_open_conns,
            max_idle_conns=self.db_max_idle_conns,
            min_conns=self.db_min_conns,
            max_idle_time=self.db_max_idle_time,
            max_lifetime=self.db_max_conn_lifetime,
            connect_timeout=self.db_connect_timeout,
            network_timeout=self.db_network_timeout,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            "env": self.env,
            "db_dsn": self.db_dsn,
            "db_max_open_conns": self.db_max_open_conns,
            "db_max_idle_conns": self.db_max_idle_conns,
            "db_min_conns": self.db_min_conns,
            "db_max_idle_time": self.db_max_idle_time,
            "db_max_conn_lifetime": self.db_max_conn_lifetime,
            "db_connect_timeout": self.db_connect_timeout,
            "db_network_timeout": self.db_network_timeout,
            "db_read_timeout": self.db_read_timeout,
            "db_write_timeout": self.db_write_timeout,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached Settings singleton.

    Use this function for dependency injection and testing overrides.
    The cache ensures only one Settings instance exists per process.

    For testing: override with get_settings.cache_clear() then set env vars.
    """
    return Settings()
