"""Select the relay backend named by the configuration."""

from __future__ import annotations

import logging

from src.config import RelayConfig
from src.relay.base import QueuePublisher

logger = logging.getLogger(__name__)


def build_publisher(config: RelayConfig) -> QueuePublisher:
    """Construct (but do not verify) the publisher for ``config.queue_backend``."""
    if config.queue_backend == "tasks":
        from src.relay.cloud_tasks import CloudTasksPublisher

        publisher: QueuePublisher = CloudTasksPublisher(
            project_id=config.project_id,
            location=config.location or "",
            queue_id=config.queue_id or "",
            target_url=config.target_url or "",
            target_token=config.target_token or "",
        )
    else:
        from src.relay.pubsub import PubSubPublisher

        publisher = PubSubPublisher(
            project_id=config.project_id,
            topic_id=config.topic_id or "",
        )
    logger.info("Queue publisher created", extra={"backend": publisher.name})
    return publisher
