"""Structured JSON logging for the data layer using structlog."""

from __future__ import annotations

import logging.config
from typing import Any

import structlog

_CONFIGURED = False


def _add_environment(env: str) -> Any:
    def processor(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("env", env)
        return event_dict

    return processor


def configure_logging(log_level: str = "INFO", env: str = "development") -> None:
    """
    Configure structlog with JSON output on stdout. Idempotent.

    Args:
        log_level: Minimum level emitted (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        env: Deployment environment stamped on every entry
    """
    global _CONFIGURED

    if _CONFIGURED:
        return

    level_num = getattr(logging, log_level.upper())
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_environment(env),
        structlog.processors.dict_tracebacks,
    ]

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.processors.JSONRenderer(),
                    "foreign_pre_chain": shared_processors,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": log_level,
                "handlers": ["stdout"],
            },
            "loggers": {
                "greenlight": {
                    "level": log_level,
                    "propagate": False,
                    "handlers": ["stdout"],
                },
                # Pool maintenance chatter stays at WARNING unless debugging.
                "psycopg.pool": {
                    "level": "DEBUG" if level_num <= logging.DEBUG else "WARNING",
                },
            },
        }
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    _CONFIGURED = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
