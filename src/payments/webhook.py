"""Verification and parsing of Stripe webhook deliveries."""

import json
from dataclasses import dataclass, field
from typing import Any, Protocol

from src.config.settings import settings
from src.payments.errors import SignatureVerificationError
from src.rsvps.dtos import PaymentEventType

STRIPE_EVENT_TYPES = {
    "payment_intent.succeeded": PaymentEventType.SUCCEEDED,
    "payment_intent.payment_failed": PaymentEventType.FAILED,
}


class PaymentWebhookVerifier(Protocol):
    """Protocol for payment webhook signature verification."""

    def __call__(self, payload: str, signature: str | None) -> dict[str, Any]:
        """Verify the signature and return the parsed event."""
        ...


class StripeWebhookVerifier:
    """Default verifier using Stripe's signature scheme."""

    def __init__(self, secret: str | None = None, tolerance: int = 300):
        self._secret = secret if secret is not None else settings.stripe_webhook_secret
        self._tolerance = tolerance

    def __call__(self, payload: str, signature: str | None) -> dict[str, Any]:
        import stripe

        if not self._secret:
            raise SignatureVerificationError("Webhook secret not configured")
        if not signature:
            raise SignatureVerificationError("Missing Stripe-Signature header")

        try:
            stripe.WebhookSignature.verify_header(
                payload, signature, self._secret, self._tolerance
            )
        except stripe.SignatureVerificationError as e:
            raise SignatureVerificationError(str(e)) from e

        try:
            return json.loads(payload)
        except ValueError as e:
            raise SignatureVerificationError("Invalid payload") from e


@dataclass(frozen=True)
class PaymentEvent:
    event_id: str | None
    event_type: PaymentEventType | None
    raw_type: str
    charge_ref: str | None
    metadata: dict[str, str] = field(default_factory=dict)


def parse_stripe_event(event: dict[str, Any]) -> PaymentEvent:
    raw_type = event.get("type", "")
    obj = event.get("data", {}).get("object", {}) or {}
    return PaymentEvent(
        event_id=event.get("id"),
        event_type=STRIPE_EVENT_TYPES.get(raw_type),
        raw_type=raw_type,
        charge_ref=obj.get("id"),
        metadata=dict(obj.get("metadata") or {}),
    )
