"""Process entrypoint: configure, verify the queue, serve.

Exit codes:
    0: server stopped normally
    1: configuration, audit log, queue backend or listener unusable at startup

Usage:
    python -m src.main
"""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn

from src.audit.logger import AuditLogger
from src.config import ConfigError, RelayConfig
from src.logging_config import configure_logging
from src.relay.base import QueueUnavailableError
from src.relay.factory import build_publisher
from src.server.app import create_app

logger = logging.getLogger(__name__)


def load_config() -> RelayConfig | None:
    try:
        config = RelayConfig.from_env()
        configure_logging(config.log_level)
    except (ConfigError, ValueError) as exc:
        configure_logging()
        logger.error(
            "Failed to read configuration from environment",
            extra={"reason": str(exc)},
        )
        return None
    return config


async def serve(config: RelayConfig) -> int:
    """Open the audit sink, build the publisher, check the destination, run uvicorn."""
    audit_logger: AuditLogger | None = None
    if config.audit_log_path:
        try:
            audit_logger = AuditLogger.from_config(config)
        except OSError as exc:
            logger.error(
                "Failed to open audit log",
                extra={"path": config.audit_log_path, "reason": str(exc)},
            )
            return 1

    try:
        return await _serve_with_publisher(config, audit_logger)
    finally:
        if audit_logger:
            audit_logger.close()


async def _serve_with_publisher(
    config: RelayConfig, audit_logger: AuditLogger | None,
) -> int:
    try:
        publisher = build_publisher(config)
    except Exception as exc:  # client construction fails on missing credentials
        logger.error("Failed to create client", extra={"reason": str(exc)})
        return 1

    try:
        await publisher.verify()
    except QueueUnavailableError as exc:
        logger.error("Queue backend unavailable", extra={"reason": str(exc)})
        await publisher.close()
        return 1

    app = create_app(config, publisher, audit_logger)
    server = uvicorn.Server(uvicorn.Config(
        app,
        host="0.0.0.0",  # noqa: S104
        port=config.port,
        log_config=None,
    ))

    logger.info("Starting server", extra={"address": f":{config.port}"})
    try:
        await server.serve()
    finally:
        await publisher.close()

    if not server.started:
        logger.error("Failed to start server", extra={"address": f":{config.port}"})
        return 1
    return 0


def run() -> int:
    config = load_config()
    if config is None:
        return 1
    return asyncio.run(serve(config))


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
