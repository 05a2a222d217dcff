"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging.config
from pathlib import Path
from typing import Any

import structlog

LOGGER_NAME = "quote_keeper"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_LOGGING_INITIALISED = False


def _default_log_dir() -> Path:
    return Path.cwd() / "logs"


def _file_handler(path: Path, level: str) -> dict[str, Any]:
    return {
        "class": "logging.FileHandler",
        "level": level,
        "filename": str(path),
        "encoding": "utf-8",
        "formatter": "json",
    }


def build_logging_config(log_dir: Path, verbose: bool = False) -> dict[str, Any]:
    """Console plus run/error log files, all rendered as JSON lines."""

    level = "DEBUG" if verbose else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.jsonlogger.JsonFormatter", "fmt": JSON_FORMAT},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "level": level, "formatter": "json"},
            "run_log": _file_handler(log_dir / "quote_keeper.log", "INFO"),
            "error_log": _file_handler(log_dir / "error.log", "ERROR"),
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["console", "run_log", "error_log"],
                "level": level,
                "propagate": False,
            },
        },
    }


def structlog_processors() -> list:
    # Events are handed to stdlib as dicts; the JSON formatter renders them.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Configure once per process and return the application logger."""

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        target = log_dir or _default_log_dir()
        target.mkdir(parents=True, exist_ok=True)
        logging.config.dictConfig(build_logging_config(target, verbose))
        structlog.configure(
            processors=structlog_processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger(LOGGER_NAME)


__all__ = ["build_logging_config", "configure_logging", "structlog_processors"]
