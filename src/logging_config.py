"""Structured JSON logging for the relay process.

Every record is one JSON object on stdout with ``level``, ``logger``,
``message`` and ``service`` keys, plus whatever the call site passes in
``extra``::

    logger.info("Enqueued message", extra={"message_id": "123"})
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

SERVICE_NAME = "waqu"

_FIELD_RENAMES = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter(service_name: str = SERVICE_NAME) -> JsonFormatter:
    return JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields=_FIELD_RENAMES,
        static_fields={"service": service_name},
    )


def configure_logging(level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
    """Install a single JSON stdout handler on the root logger.

    Raises:
        ValueError: if ``level`` is not a standard level name.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Valid: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(create_json_formatter(service_name))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Replace existing handlers to avoid duplicate lines
    root.handlers = [handler]
