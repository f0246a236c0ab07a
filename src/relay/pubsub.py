"""Topic-publish relay backend on Google Cloud Pub/Sub."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from google.api_core import exceptions as api_exceptions

from src.relay.base import EnqueueError, QueueUnavailableError

if TYPE_CHECKING:
    from google.cloud.pubsub_v1 import PublisherClient

logger = logging.getLogger(__name__)


class PubSubPublisher:
    """Publishes each payload as the data of one Pub/Sub message."""

    name = "pubsub"

    def __init__(
        self,
        project_id: str,
        topic_id: str,
        client: PublisherClient | None = None,
    ) -> None:
        if client is None:
            from google.cloud import pubsub_v1

            client = pubsub_v1.PublisherClient()
        self._client = client
        self.topic_path: str = client.topic_path(project_id, topic_id)

    async def verify(self) -> None:
        """Fail unless the topic exists and is reachable."""
        try:
            await asyncio.to_thread(
                self._client.get_topic, request={"topic": self.topic_path},
            )
        except api_exceptions.NotFound as exc:
            raise QueueUnavailableError(
                f"Topic does not exist: {self.topic_path}"
            ) from exc
        except api_exceptions.GoogleAPIError as exc:
            raise QueueUnavailableError(
                f"Failed to check if topic exists: {exc}"
            ) from exc
        logger.info("Pub/Sub topic verified", extra={"topic": self.topic_path})

    async def enqueue(self, payload: bytes) -> str:
        """Publish ``payload`` and wait for the server-assigned message id."""
        try:
            future = self._client.publish(self.topic_path, payload)
            message_id = await asyncio.wrap_future(future)
        except Exception as exc:  # any publish failure maps to a 500
            raise EnqueueError(self.name, str(exc)) from exc
        return str(message_id)

    async def close(self) -> None:
        # stop() flushes pending batches and blocks until they are sent
        await asyncio.to_thread(self._client.stop)
