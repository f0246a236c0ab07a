"""Ingress filter: bearer token check and message-event classification."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from src.models import WebhookNotification

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


def extract_token(headers: Mapping[str, str]) -> str:
    """Return the Authorization value with a leading ``Bearer `` removed.

    A value without the prefix is returned unchanged so that it fails the
    comparison in :func:`authenticate`.
    """
    value = headers.get("authorization")
    if value is None:
        value = headers.get("Authorization", "")
    return value.removeprefix(_BEARER_PREFIX)


def authenticate(headers: Mapping[str, str], token: str) -> bool:
    """Return True only if the request presents exactly ``token``.

    Constant-time comparison via hmac.compare_digest.
    """
    if not token:
        return False
    provided = extract_token(headers)
    if not provided:
        return False
    return hmac.compare_digest(provided.encode(), token.encode())


def is_message_event(body: bytes) -> bool:
    """Return True if the payload contains at least one user message.

    Bodies that are not JSON, or JSON of the wrong shape, are not message
    events. This never raises.
    """
    try:
        notification = WebhookNotification.model_validate_json(body)
    except ValidationError as exc:
        logger.debug(
            "Payload is not a webhook notification",
            extra={"error_count": exc.error_count()},
        )
        return False
    return notification.has_messages()
