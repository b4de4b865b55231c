"""Structured logging configuration — structlog + stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and stdlib logging.

    Reads from environment variables:
        NODEAUDIT_LOG_LEVEL  — log level (default: INFO), overridden by *level*
        NODEAUDIT_LOG_FORMAT — console | json (default: console), overridden by *log_format*

    Logs are written to stderr; stdout is reserved for reports and JSON output.
    """
    log_level = (level or os.environ.get("NODEAUDIT_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.environ.get("NODEAUDIT_LOG_FORMAT", "console")).lower()
    if log_format not in ("console", "json"):
        raise ValueError(f"unknown log format {log_format!r} (expected console or json)")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": log_level,
            },
            "loggers": {
                "nodeaudit": {"level": log_level},
                "httpx": {"level": "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
        }
    )
