import hashlib
import hmac
import json
import time

import pytest

from src.payments.errors import SignatureVerificationError
from src.payments.webhook import StripeWebhookVerifier, parse_stripe_event
from src.rsvps.dtos import PaymentEventType

SECRET = "whsec_test_secret"

EVENT = {
    "id": "evt_1",
    "type": "payment_intent.succeeded",
    "data": {
        "object": {
            "id": "pi_123",
            "metadata": {"name": "Gaby", "email": "gaby@example.com", "guest_count": "2"},
        }
    },
}


def _sign(payload: str, secret: str = SECRET, timestamp: int | None = None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode()
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def test_valid_signature_returns_event():
    payload = json.dumps(EVENT)

    event = StripeWebhookVerifier(secret=SECRET)(payload, _sign(payload))

    assert event["id"] == "evt_1"


def test_tampered_payload_rejected():
    payload = json.dumps(EVENT)
    signature = _sign(payload)
    tampered = payload.replace("pi_123", "pi_999")

    with pytest.raises(SignatureVerificationError):
        StripeWebhookVerifier(secret=SECRET)(tampered, signature)


def test_wrong_secret_rejected():
    payload = json.dumps(EVENT)

    with pytest.raises(SignatureVerificationError):
        StripeWebhookVerifier(secret=SECRET)(payload, _sign(payload, secret="whsec_other"))


def test_stale_timestamp_rejected():
    payload = json.dumps(EVENT)
    signature = _sign(payload, timestamp=int(time.time()) - 3600)

    with pytest.raises(SignatureVerificationError):
        StripeWebhookVerifier(secret=SECRET, tolerance=300)(payload, signature)


def test_missing_signature_or_secret_rejected():
    payload = json.dumps(EVENT)

    with pytest.raises(SignatureVerificationError):
        StripeWebhookVerifier(secret=SECRET)(payload, None)
    with pytest.raises(SignatureVerificationError):
        StripeWebhookVerifier(secret="")(payload, _sign(payload))


def test_parse_stripe_event():
    event = parse_stripe_event(EVENT)

    assert event.event_id == "evt_1"
    assert event.event_type == PaymentEventType.SUCCEEDED
    assert event.charge_ref == "pi_123"
    assert event.metadata["guest_count"] == "2"


def test_parse_unhandled_event():
    event = parse_stripe_event({"id": "evt_2", "type": "charge.refunded", "data": {"object": {}}})

    assert event.event_type is None
    assert event.raw_type == "charge.refunded"
    assert event.charge_ref is None
