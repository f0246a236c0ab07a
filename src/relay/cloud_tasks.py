"""Task-dispatch relay backend on Google Cloud Tasks.

Each payload becomes an HTTP task that Cloud Tasks later POSTs to a fixed
downstream URL. The URL and its credentials are fixed at startup and never
derived from the inbound request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from google.api_core import exceptions as api_exceptions
from google.cloud import tasks_v2

from src.relay.base import EnqueueError, QueueUnavailableError

if TYPE_CHECKING:
    from google.cloud.tasks_v2 import CloudTasksAsyncClient

logger = logging.getLogger(__name__)


class CloudTasksPublisher:
    """Enqueues each payload as the body of a deferred HTTP POST task."""

    name = "tasks"

    def __init__(
        self,
        project_id: str,
        location: str,
        queue_id: str,
        target_url: str,
        target_token: str,
        client: CloudTasksAsyncClient | None = None,
    ) -> None:
        self._client = client or tasks_v2.CloudTasksAsyncClient()
        self.queue_path: str = self._client.queue_path(project_id, location, queue_id)
        self._target_url = target_url
        self._headers = {
            "Authorization": f"Bearer {target_token}",
            "Content-Type": "application/json",
        }

    def build_task(self, payload: bytes) -> tasks_v2.Task:
        return tasks_v2.Task(
            http_request=tasks_v2.HttpRequest(
                http_method=tasks_v2.HttpMethod.POST,
                url=self._target_url,
                headers=self._headers,
                body=payload,
            ),
        )

    async def verify(self) -> None:
        """Fail unless the queue exists and is reachable."""
        try:
            await self._client.get_queue(name=self.queue_path)
        except api_exceptions.NotFound as exc:
            raise QueueUnavailableError(
                f"Queue does not exist: {self.queue_path}"
            ) from exc
        except api_exceptions.GoogleAPIError as exc:
            raise QueueUnavailableError(
                f"Failed to check if queue exists: {exc}"
            ) from exc
        logger.info("Cloud Tasks queue verified", extra={"queue": self.queue_path})

    async def enqueue(self, payload: bytes) -> str:
        """Create the task and return the last segment of its name."""
        try:
            task = await self._client.create_task(
                parent=self.queue_path, task=self.build_task(payload),
            )
        except Exception as exc:  # any create failure maps to a 500
            raise EnqueueError(self.name, str(exc)) from exc
        return task.name.rsplit("/", 1)[-1]

    async def close(self) -> None:
        transport = getattr(self._client, "transport", None)
        if transport is not None:
            await transport.close()
