import json
import logging
from typing import Any, Protocol

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from src.config.settings import settings
from src.notifications.status_updater import (
    NotificationStatusUpdater,
    SQLNotificationStatusUpdater,
)
from src.webhooks import urls
from src.webhooks.schema import DeliveryEvent

logger = logging.getLogger(__name__)

router = APIRouter()


class WebhookVerifier(Protocol):
    """Protocol for webhook signature verification."""

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        """Verify webhook signature and return parsed payload."""
        ...


class SvixWebhookVerifier:
    """Default webhook verifier using Svix."""

    def __init__(self, secret: str | None = None):
        self._secret = secret if secret is not None else settings.resend_webhook_secret

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        from svix.webhooks import Webhook, WebhookVerificationError

        if not self._secret:
            raise ValueError("Webhook secret not configured")

        wh = Webhook(self._secret)

        try:
            wh.verify(payload, headers)
        except WebhookVerificationError as e:
            raise HTTPException(status_code=401, detail=f"Invalid signature: {e}")
        return json.loads(payload)


def get_webhook_verifier() -> WebhookVerifier:
    """Factory for webhook verifier. Override in tests."""
    return SvixWebhookVerifier()


def get_status_updater() -> NotificationStatusUpdater:
    """Factory for the notification status updater. Override in tests."""
    return SQLNotificationStatusUpdater()


@router.post(urls.NOTIFICATION_WEBHOOK_URL)
async def notification_status_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    status_updater: NotificationStatusUpdater = Depends(get_status_updater),
) -> dict[str, str]:
    """
    Handle Resend delivery-status events and update the notification log.
    """
    # Get raw body for signature verification
    body = await request.body()
    payload_str = body.decode("utf-8")

    headers: dict[str, str] = {}
    for name in ("svix-id", "svix-timestamp", "svix-signature"):
        if value := request.headers.get(name):
            headers[name] = value

    try:
        payload = verifier(payload_str, headers)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Webhook verification error: {e}")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = DeliveryEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Malformed delivery event: {e}")
        return {"status": "ignored"}

    if not event.data.email_id:
        logger.warning(f"Received {event.type} webhook without email_id")
        return {"status": "ignored"}

    try:
        updated = await status_updater.update_status(
            event.data.email_id, event.type, event.data.model_dump()
        )
    except Exception as e:
        logger.error(f"Failed to update status for {event.data.email_id}: {e}")
        raise HTTPException(status_code=500, detail="Status update failed")

    if not updated:
        logger.info(f"No notification log updated for {event.type} {event.data.email_id}")
        return {"status": "ignored"}

    return {"status": "updated"}
