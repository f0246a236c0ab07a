"""FastAPI application exposing the webhook relay endpoint."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from src.audit.logger import AuditLogger
from src.config import RelayConfig
from src.relay.base import QueuePublisher
from src.server.handler import WebhookRelayHandler

WEBHOOK_PATH = "/waqu"


def create_app(
    config: RelayConfig,
    publisher: QueuePublisher,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the relay app around an already-built publisher."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    handler = WebhookRelayHandler(
        token=config.token,
        publisher=publisher,
        ignore_status=config.ignore_status,
        audit_logger=audit_logger,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(WEBHOOK_PATH)
    async def relay_webhook(request: Request) -> Response:
        return await handler.handle(request)

    return app
