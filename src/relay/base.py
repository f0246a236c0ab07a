"""Queue publisher contract shared by every relay backend."""

from __future__ import annotations

from typing import Protocol


class EnqueueError(Exception):
    """Raised when the backend did not durably accept a payload."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend}: {reason}")


class QueueUnavailableError(Exception):
    """Raised at startup when the destination queue cannot be used."""


class QueuePublisher(Protocol):
    """Hands raw payload bytes to a durable queue.

    ``enqueue`` makes exactly one attempt. A returned identifier means the
    backend has durably accepted the payload.
    """

    name: str

    async def verify(self) -> None: ...

    async def enqueue(self, payload: bytes) -> str: ...

    async def close(self) -> None: ...
