"""Logging configuration helpers for temptrack.

The library itself only emits records through module loggers under the
``temptrack`` namespace. Applications (and test runs) that want to see them
call :func:`configure_logging`.
"""

from __future__ import annotations

import logging
import os

from .constants import DEFAULT_LOG_FILE, DEFAULT_LOG_HANDLER, DEFAULT_LOG_LEVEL
from .shared.validators import ValidationError

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "temptrack"


def _create_handler(handler_type: str, log_format: str, log_level: int) -> logging.Handler:
    if handler_type == "console":
        handler: logging.Handler = logging.StreamHandler()
    elif handler_type == "file":
        log_file = os.getenv("TEMPTRACK_LOG_FILE", DEFAULT_LOG_FILE)
        handler = logging.FileHandler(log_file)
    else:
        raise ValidationError(f"Unsupported handler type: {handler_type}")

    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(log_format))
    return handler


def configure_logging(
    *,
    level: str | None = None,
    log_format: str | None = None,
    handler_type: str | None = None,
) -> logging.Logger:
    """Attach a single handler to the ``temptrack`` logger.

    Reconfiguring replaces the previous handler. Environment overrides:

    - ``TEMPTRACK_LOG_LEVEL``: logging level (e.g. ``DEBUG``, ``INFO``)
    - ``TEMPTRACK_LOG_FORMAT``: logging format string
    - ``TEMPTRACK_LOG_HANDLER``: handler type (``console`` or ``file``)
    - ``TEMPTRACK_LOG_FILE``: file path when using the ``file`` handler
    """

    resolved_level = (level or os.getenv("TEMPTRACK_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    resolved_format = log_format or os.getenv("TEMPTRACK_LOG_FORMAT", DEFAULT_LOG_FORMAT)
    resolved_handler = (
        handler_type or os.getenv("TEMPTRACK_LOG_HANDLER", DEFAULT_LOG_HANDLER)
    ).lower()

    numeric_level = logging.getLevelName(resolved_level)
    if isinstance(numeric_level, str):
        # Unknown level names come back as "Level X"
        numeric_level = logging.INFO

    handler = _create_handler(resolved_handler, resolved_format, numeric_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)

    logger.debug(
        "Logging configured: level=%s handler=%s", resolved_level, resolved_handler
    )
    return logger
