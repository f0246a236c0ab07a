"""Relay configuration loaded from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

QueueBackend = Literal["pubsub", "tasks"]

# Field name -> environment variable
ENV_VARS: dict[str, str] = {
    "token": "TOKEN",
    "queue_backend": "QUEUE_BACKEND",
    "project_id": "PROJECT_ID",
    "topic_id": "TOPIC_ID",
    "location": "LOCATION",
    "queue_id": "QUEUE_ID",
    "target_url": "TARGET_URL",
    "target_token": "TARGET_TOKEN",
    "port": "PORT",
    "ignore_status": "IGNORE_STATUS",
    "log_level": "LOG_LEVEL",
    "audit_log_path": "AUDIT_LOG_PATH",
    "audit_log_max_bytes": "AUDIT_LOG_MAX_BYTES",
    "audit_log_backup_count": "AUDIT_LOG_BACKUP_COUNT",
}

_BACKEND_REQUIRED: dict[str, tuple[str, ...]] = {
    "pubsub": ("topic_id",),
    "tasks": ("location", "queue_id", "target_url", "target_token"),
}


class ConfigError(Exception):
    """Raised when the environment does not describe a runnable relay."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems))


class RelayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    queue_backend: QueueBackend = "pubsub"
    project_id: str = Field(min_length=1)
    topic_id: str | None = None
    location: str | None = None
    queue_id: str | None = None
    target_url: str | None = None
    target_token: str | None = None
    port: int = Field(default=8080, ge=1, le=65535)
    ignore_status: bool = True
    log_level: str = "INFO"
    audit_log_path: str | None = None
    audit_log_max_bytes: int = Field(default=10_485_760, ge=1)
    audit_log_backup_count: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def check_backend_fields(self) -> RelayConfig:
        missing = [
            ENV_VARS[name]
            for name in _BACKEND_REQUIRED[self.queue_backend]
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"QUEUE_BACKEND={self.queue_backend} requires {', '.join(missing)}"
            )
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build the config from ``environ`` (defaults to ``os.environ``).

        Unset variables fall back to field defaults. Raises ConfigError
        listing every problem found.
        """
        env = os.environ if environ is None else environ
        raw = {field: env[var] for field, var in ENV_VARS.items() if var in env}
        if "queue_backend" in raw:
            raw["queue_backend"] = raw["queue_backend"].strip().lower()
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> list[str]:
    problems: list[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[0] in ENV_VARS:
            var = ENV_VARS[str(loc[0])]
            if error["type"] == "missing":
                problems.append(f"{var} is required")
            else:
                problems.append(f"{var}: {error['msg']}")
        else:
            problems.append(str(error["msg"]))
    return problems
