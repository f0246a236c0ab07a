"""Shared Pydantic data models for the waqu relay."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Enums ---


class AuditEventType(str, Enum):
    AUTH_FAILURE = "auth_failure"
    BODY_READ_FAILURE = "body_read_failure"
    MESSAGE_DROPPED = "message_dropped"
    MESSAGE_ENQUEUED = "message_enqueued"
    ENQUEUE_FAILURE = "enqueue_failure"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    INFO = "info"


# --- Webhook Notification Models ---
#
# Partial projection of the WhatsApp Business webhook payload. Only the path
# entry[].changes[].value.messages is modelled; every other field is ignored.


class ChangeValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    messages: list[Any] = Field(default_factory=list)

    @field_validator("messages", mode="before")
    @classmethod
    def null_messages(cls, value: object) -> object:
        return [] if value is None else value


class EntryChange(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    value: ChangeValue = Field(default_factory=ChangeValue)

    @field_validator("value", mode="before")
    @classmethod
    def null_value(cls, value: object) -> object:
        return {} if value is None else value


class NotificationEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    changes: list[EntryChange] = Field(default_factory=list)

    @field_validator("changes", mode="before")
    @classmethod
    def null_changes(cls, value: object) -> object:
        return [] if value is None else value


class WebhookNotification(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    entry: list[NotificationEntry] = Field(default_factory=list)

    @field_validator("entry", mode="before")
    @classmethod
    def null_entry(cls, value: object) -> object:
        return [] if value is None else value

    def has_messages(self) -> bool:
        """True if any change value carries at least one message."""
        for entry in self.entry:
            for change in entry.changes:
                if change.value.messages:
                    return True
        return False


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    action: str
    result: str  # "success" | "failure" | "dropped"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
