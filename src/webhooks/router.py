import hashlib
import hmac
import logging
from typing import Protocol

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from src.config.settings import settings
from src.events.dependencies import get_event_repository
from src.events.dtos import EventNotFoundError, PersistenceError
from src.events.repository import EventRepository
from src.webhooks import urls
from src.webhooks.schema import ORDER_CREATED, LemonSqueezyWebhook

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "X-Signature"


# =============================================================================
# Protocols (interfaces) for dependency injection
# =============================================================================


class WebhookVerifier(Protocol):
    """Protocol for webhook signature verification."""

    def __call__(self, payload: bytes, signature: str | None) -> None:
        """Raise HTTPException if the signature does not match the payload."""
        ...


# =============================================================================
# Default implementations
# =============================================================================


class HmacWebhookVerifier:
    """Default verifier: hex HMAC-SHA256 of the raw body, keyed with the signing secret."""

    def __init__(self, secret: str | None = None):
        self._secret = settings.lemonsqueezy_webhook_secret if secret is None else secret

    def __call__(self, payload: bytes, signature: str | None) -> None:
        if not self._secret:
            logger.error("Lemon Squeezy webhook secret is not configured")
            raise HTTPException(status_code=500, detail="Webhook secret not configured")
        if not signature:
            raise HTTPException(status_code=401, detail="Missing signature")

        digest = hmac.new(self._secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(digest, signature):
            raise HTTPException(status_code=401, detail="Invalid signature")


# =============================================================================
# Dependency providers (can be overridden in tests)
# =============================================================================


def get_webhook_verifier() -> WebhookVerifier:
    """Factory for webhook verifier. Override in tests."""
    return HmacWebhookVerifier()


# =============================================================================
# Webhook endpoint
# =============================================================================


@router.post(urls.LEMONSQUEEZY_WEBHOOK_URL)
async def lemonsqueezy_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    repository: EventRepository = Depends(get_event_repository),
) -> dict[str, str]:
    """
    Handle Lemon Squeezy webhooks.

    ``order_created`` upgrades the event named in ``meta.custom_data.event_id``
    to premium. Upgrading is idempotent, so redelivered webhooks are harmless.
    Other event types are acknowledged and ignored.
    """
    body = await request.body()
    verifier(body, request.headers.get(SIGNATURE_HEADER))

    try:
        payload = LemonSqueezyWebhook.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Malformed Lemon Squeezy webhook: {e}")
        raise HTTPException(status_code=400, detail="Malformed webhook payload")

    event_name = payload.meta.event_name
    if event_name != ORDER_CREATED:
        logger.info(f"Received unhandled Lemon Squeezy event: {event_name}")
        return {"status": "ignored"}

    event_id = payload.meta.event_id
    if not event_id:
        logger.warning("order_created webhook without event_id in custom_data")
        raise HTTPException(status_code=400, detail="Missing event_id in custom_data")

    try:
        await repository.mark_premium(event_id)
    except EventNotFoundError:
        logger.warning(f"order_created webhook for unknown event {event_id}")
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
    except PersistenceError as e:
        logger.error(f"Failed to upgrade event {event_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update event")

    logger.info(f"Upgraded event {event_id} to premium")
    return {"status": "upgraded"}
