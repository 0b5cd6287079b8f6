import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from src.payments.errors import SignatureVerificationError
from src.payments.webhook import PaymentWebhookVerifier, StripeWebhookVerifier, parse_stripe_event
from src.rsvps.dependencies import get_lifecycle_controller
from src.rsvps.lifecycle import RSVPLifecycleController
from src.rsvps.urls import STRIPE_WEBHOOK_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_payment_webhook_verifier() -> PaymentWebhookVerifier:
    """Factory for the payment webhook verifier. Override in tests."""
    return StripeWebhookVerifier()


@router.post(STRIPE_WEBHOOK_URL)
async def stripe_webhook(
    request: Request,
    verifier: PaymentWebhookVerifier = Depends(get_payment_webhook_verifier),
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> dict[str, str]:
    """
    Handle Stripe payment events.
    Unverified events are rejected before anything is read or written.
    """
    # Signature covers the raw body
    body = await request.body()
    payload_str = body.decode("utf-8")

    try:
        event = verifier(payload_str, request.headers.get("stripe-signature"))
    except SignatureVerificationError as e:
        logger.warning(f"Stripe webhook rejected: {e}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    payment_event = parse_stripe_event(event)
    if payment_event.event_type is None:
        logger.info(f"Unhandled Stripe event type: {payment_event.raw_type}")
        return {"status": "ignored"}

    try:
        outcome = await controller.reconcile_async_event(
            payment_event.event_type,
            payment_event.charge_ref,
            payment_event.metadata,
        )
    except Exception as e:
        # Stripe retries on 5xx
        logger.error(f"Failed to reconcile Stripe event {payment_event.event_id}: {e}")
        raise HTTPException(status_code=500, detail="Reconciliation failed")

    return {"status": outcome.value}
