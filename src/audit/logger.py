"""Audit logger: append-only JSON Lines sink for relay decisions."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.config import RelayConfig
from src.models import AuditEvent


class AuditLogger:
    """Writes one JSON line per AuditEvent, rotating by size.

    Events never carry payload bytes or credentials; callers put only
    identifiers, sizes and failure reasons in ``details``.
    """

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ) -> None:
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._handler = RotatingFileHandler(
            self.log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        # Dedicated logger per file; never propagates into the service log
        self._logger = logging.getLogger(f"waqu.audit.{self.log_path}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.handlers = [self._handler]

    @classmethod
    def from_config(cls, config: RelayConfig) -> AuditLogger:
        """Create AuditLogger from the relay config's audit settings."""
        if not config.audit_log_path:
            raise ValueError("audit_log_path is not configured")
        return cls(
            log_path=config.audit_log_path,
            max_bytes=config.audit_log_max_bytes,
            backup_count=config.audit_log_backup_count,
        )

    def log(self, event: AuditEvent) -> None:
        self._logger.info(event.model_dump_json())

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()
