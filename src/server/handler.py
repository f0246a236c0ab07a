"""Webhook relay request handler.

Request states:
1. Authenticate (401, no body read)
2. Read body (500 on client disconnect)
3. Classify, when status filtering is on (200, silent drop)
4. Enqueue, one attempt (500 on failure, 200 on success)

Responses never carry a body; failure reasons go to the log and the
audit sink only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.requests import ClientDisconnect, Request
from starlette.responses import Response

from src.ingress.filter import authenticate, is_message_event
from src.models import AuditEvent, AuditEventType, RiskLevel
from src.relay.base import EnqueueError

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.relay.base import QueuePublisher

logger = logging.getLogger(__name__)


class WebhookRelayHandler:
    """Authenticates, filters and relays one webhook request."""

    def __init__(
        self,
        token: str,
        publisher: QueuePublisher,
        ignore_status: bool = True,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._token = token
        self._publisher = publisher
        self._ignore_status = ignore_status
        self._audit = audit_logger

    async def handle(self, request: Request) -> Response:
        if not authenticate(request.headers, self._token):
            logger.warning("Rejected unauthenticated request", extra={"path": request.url.path})
            self._log_event(
                request,
                AuditEventType.AUTH_FAILURE,
                result="failure",
                risk_level=RiskLevel.HIGH,
            )
            return Response(status_code=401)

        try:
            body = await request.body()
        except ClientDisconnect as exc:
            logger.error(
                "Failed to read request body",
                extra={"reason": repr(exc)},
            )
            self._log_event(
                request,
                AuditEventType.BODY_READ_FAILURE,
                result="failure",
                risk_level=RiskLevel.MEDIUM,
                details={"reason": "client_disconnect"},
            )
            return Response(status_code=500)

        if self._ignore_status and not is_message_event(body):
            logger.debug("Dropped non-message notification", extra={"size": len(body)})
            self._log_event(
                request,
                AuditEventType.MESSAGE_DROPPED,
                result="dropped",
                risk_level=RiskLevel.INFO,
                details={"size": len(body)},
            )
            return Response(status_code=200)

        try:
            message_id = await self._publisher.enqueue(body)
        except EnqueueError as exc:
            logger.error(
                "Failed to enqueue message",
                extra={"backend": exc.backend, "reason": exc.reason},
            )
            self._log_event(
                request,
                AuditEventType.ENQUEUE_FAILURE,
                result="failure",
                risk_level=RiskLevel.HIGH,
                details={"backend": exc.backend, "reason": exc.reason},
            )
            return Response(status_code=500)

        logger.info(
            "Enqueued message",
            extra={"backend": self._publisher.name, "message_id": message_id},
        )
        self._log_event(
            request,
            AuditEventType.MESSAGE_ENQUEUED,
            result="success",
            risk_level=RiskLevel.INFO,
            details={
                "backend": self._publisher.name,
                "message_id": message_id,
                "size": len(body),
            },
        )
        return Response(status_code=200)

    def _log_event(
        self,
        request: Request,
        event_type: AuditEventType,
        result: str,
        risk_level: RiskLevel,
        details: dict[str, object] | None = None,
    ) -> None:
        if not self._audit:
            return
        self._audit.log(AuditEvent(
            event_type=event_type,
            source_ip=request.client.host if request.client else None,
            action=f"{request.method} {request.url.path}",
            result=result,
            risk_level=risk_level,
            details=details,
        ))
