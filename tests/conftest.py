"""Shared test fixtures for the waqu relay."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.config import RelayConfig
from src.models import AuditEvent, AuditEventType, RiskLevel
from src.relay.base import EnqueueError

TOKEN = "secret"


class FakePublisher:
    """Records every enqueue call; optionally fails with EnqueueError."""

    name = "fake"

    def __init__(self, fail_with: str | None = None, message_id: str = "msg-1") -> None:
        self.calls: list[bytes] = []
        self.verified = False
        self.closed = False
        self._fail_with = fail_with
        self._message_id = message_id

    async def verify(self) -> None:
        self.verified = True

    async def enqueue(self, payload: bytes) -> str:
        self.calls.append(payload)
        if self._fail_with is not None:
            raise EnqueueError(self.name, self._fail_with)
        return self._message_id

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def failing_publisher() -> FakePublisher:
    return FakePublisher(fail_with="deadline exceeded")


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


# --- Factory functions for test data ---


def make_config(**kwargs: Any) -> RelayConfig:
    """Factory for RelayConfig with a valid Pub/Sub setup."""
    defaults: dict[str, Any] = {
        "token": TOKEN,
        "project_id": "test-project",
        "topic_id": "test-topic",
        "ignore_status": True,
    }
    defaults.update(kwargs)
    return RelayConfig(**defaults)


def make_audit_event(**kwargs: Any) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "event_type": AuditEventType.MESSAGE_ENQUEUED,
        "action": "POST /waqu",
        "result": "success",
        "risk_level": RiskLevel.INFO,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)


def make_notification(messages: list[Any] | None = None, **value: Any) -> dict[str, Any]:
    """WhatsApp Business webhook notification with one change."""
    change_value: dict[str, Any] = {
        "messaging_product": "whatsapp",
        "metadata": {"display_phone_number": "15550000000", "phone_number_id": "PID"},
    }
    if messages is not None:
        change_value["messages"] = messages
    change_value.update(value)
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA_ID",
                "changes": [{"value": change_value, "field": "messages"}],
            }
        ],
    }


def make_text_message(text: str = "hello", message_id: str = "wamid.1") -> dict[str, Any]:
    return {
        "from": "15551234567",
        "id": message_id,
        "timestamp": "1700000000",
        "type": "text",
        "text": {"body": text},
    }


def make_status_notification() -> dict[str, Any]:
    """Delivery status update: carries statuses, no messages."""
    return make_notification(
        statuses=[
            {
                "id": "wamid.1",
                "status": "delivered",
                "timestamp": "1700000001",
                "recipient_id": "15551234567",
            }
        ],
    )


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode()
