"""
Logging setup for applications that mount the body parser.

Parser decisions are logged at DEBUG with structured fields (``content_type``,
``charset``, ``content_encoding``, ``body_length``) and server-side failures at
ERROR with ``error_type``; the JSON formatter emits those as top-level keys.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from bodyparser import config

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"


def setup_logging(service_name: str = "bodyparser", level: str | None = None) -> logging.Logger:
    """Install one stdout handler on the root logger and return the service logger."""
    root = logging.getLogger()
    root.setLevel((level or config.LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)
    if config.LOG_FORMAT == "json":
        handler.setFormatter(
            JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
                static_fields={"service": service_name},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)

    logger = logging.getLogger(service_name)
    logger.debug("logging configured", extra={"log_format": config.LOG_FORMAT})
    return logger
