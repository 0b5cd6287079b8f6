"""Unit tests for StripePaymentService, mocking the Stripe client."""

import pytest
import stripe

from src.payments.errors import (
    CardDeclinedError,
    InvalidPaymentRequestError,
    PaymentBridgeUnavailableError,
)
from src.payments.stripe_service import StripePaymentService

PAYMENT_INTENT_JSON = {
    "id": "pi_123",
    "object": "payment_intent",
    "amount": 8000,
    "currency": "usd",
    "status": "succeeded",
    "client_secret": "pi_123_secret_abc",
}


class MockConfig:
    stripe_secret_key = "sk_test_123"
    http_timeout_seconds = 5.0


class MockResource:
    """Records create_async calls and returns or raises what it was given."""

    def __init__(self, object_class, response=None, error=None):
        self.object_class = object_class
        self.response = response
        self.error = error
        self.calls = []

    async def create_async(self, params, options=None):
        self.calls.append({"params": params, "options": options})
        if self.error:
            raise self.error
        return self.object_class.construct_from(self.response, "sk_test_123")


class MockStripeClient:
    """Stands in for stripe.StripeClient; only the v1 resources we call."""

    instances = []

    def __init__(self, api_key, **kwargs):
        self.api_key = api_key
        self.kwargs = kwargs
        self.v1 = self
        self.payment_intents = MockResource(stripe.PaymentIntent, response=PAYMENT_INTENT_JSON)
        self.refunds = MockResource(stripe.Refund)
        MockStripeClient.instances.append(self)


def _service() -> tuple[StripePaymentService, MockStripeClient]:
    service = StripePaymentService(config=MockConfig(), client_class=MockStripeClient)
    return service, MockStripeClient.instances[-1]


def _card_error(message="Your card was declined.", decline_code=None):
    return stripe.CardError(
        message,
        None,
        "card_declined",
        http_status=402,
        json_body={
            "error": {
                "type": "card_error",
                "code": "card_declined",
                "message": message,
                "decline_code": decline_code,
            }
        },
    )


def test_client_is_built_with_secret_key_and_timeout():
    _, client = _service()

    assert client.api_key == "sk_test_123"
    assert client.kwargs["max_network_retries"] == 0
    assert isinstance(client.kwargs["http_client"], stripe.HTTPXClient)


@pytest.mark.asyncio
async def test_authorize_with_token_confirms_immediately():
    service, client = _service()

    charge = await service.authorize(
        amount_cents=8000,
        currency="usd",
        metadata={"name": "Gaby", "guest_count": "2"},
        payment_token="pm_card_visa",
        description="Party - 2 tickets",
    )

    assert charge.payment_ref == "pi_123"
    assert charge.succeeded
    assert charge.amount_cents == 8000
    assert charge.client_secret == "pi_123_secret_abc"

    call = client.payment_intents.calls[0]
    assert call["params"]["amount"] == 8000
    assert call["params"]["metadata"] == {"name": "Gaby", "guest_count": "2"}
    assert call["params"]["payment_method"] == "pm_card_visa"
    assert call["params"]["confirm"] is True
    assert call["params"]["description"] == "Party - 2 tickets"
    assert call["params"]["automatic_payment_methods"] == {
        "enabled": True,
        "allow_redirects": "never",
    }
    assert call["options"]["idempotency_key"]


@pytest.mark.asyncio
async def test_each_authorization_gets_its_own_idempotency_key():
    service, client = _service()

    await service.authorize(amount_cents=8000, currency="usd", metadata={})
    await service.authorize(amount_cents=8000, currency="usd", metadata={})

    first, second = client.payment_intents.calls
    assert first["options"]["idempotency_key"] != second["options"]["idempotency_key"]


@pytest.mark.asyncio
async def test_authorize_without_token_returns_client_secret():
    service, client = _service()
    client.payment_intents.response = {**PAYMENT_INTENT_JSON, "status": "requires_payment_method"}

    charge = await service.authorize(amount_cents=8000, currency="usd", metadata={})

    assert not charge.succeeded
    assert charge.client_secret == "pi_123_secret_abc"
    params = client.payment_intents.calls[0]["params"]
    assert "confirm" not in params
    assert params["automatic_payment_methods"] == {"enabled": True}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (_card_error(), CardDeclinedError),
        (
            stripe.InvalidRequestError("No such PaymentMethod: 'pm_bad'", "payment_method"),
            InvalidPaymentRequestError,
        ),
        (stripe.APIConnectionError("Connection refused"), PaymentBridgeUnavailableError),
        (stripe.APIError("Something went wrong"), PaymentBridgeUnavailableError),
        (stripe.RateLimitError("Too many requests"), PaymentBridgeUnavailableError),
    ],
)
async def test_authorize_translates_stripe_errors(error, expected):
    service, client = _service()
    client.payment_intents.error = error

    with pytest.raises(expected) as exc_info:
        await service.authorize(
            amount_cents=8000, currency="usd", metadata={}, payment_token="pm_card"
        )

    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_card_error_keeps_decline_code_and_message():
    service, client = _service()
    client.payment_intents.error = _card_error("Insufficient funds.", "insufficient_funds")

    with pytest.raises(CardDeclinedError) as exc_info:
        await service.authorize(
            amount_cents=8000, currency="usd", metadata={}, payment_token="pm_card"
        )

    assert exc_info.value.message == "Insufficient funds."
    assert exc_info.value.code == "insufficient_funds"


@pytest.mark.asyncio
async def test_card_error_without_decline_code_uses_error_code():
    service, client = _service()
    client.payment_intents.error = _card_error()

    with pytest.raises(CardDeclinedError) as exc_info:
        await service.authorize(
            amount_cents=8000, currency="usd", metadata={}, payment_token="pm_card"
        )

    assert exc_info.value.code == "card_declined"


@pytest.mark.asyncio
async def test_full_refund():
    service, client = _service()
    client.refunds.response = {"id": "re_1", "object": "refund", "amount": 8000, "status": "succeeded"}

    refund = await service.refund("pi_123")

    assert refund.refund_ref == "re_1"
    assert refund.amount_cents == 8000
    assert refund.status == "succeeded"
    assert client.refunds.calls[0]["params"] == {
        "payment_intent": "pi_123",
        "reason": "requested_by_customer",
    }


@pytest.mark.asyncio
async def test_partial_refund_with_reason():
    service, client = _service()
    client.refunds.response = {"id": "re_2", "object": "refund", "amount": 2000, "status": "pending"}

    refund = await service.refund("pi_123", amount_cents=2000, reason="duplicate")

    assert refund.amount_cents == 2000
    assert client.refunds.calls[0]["params"]["amount"] == 2000
    assert client.refunds.calls[0]["params"]["reason"] == "duplicate"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (
            stripe.InvalidRequestError("Charge pi_123 has already been refunded.", None),
            InvalidPaymentRequestError,
        ),
        (stripe.APIConnectionError("Connection refused"), PaymentBridgeUnavailableError),
    ],
)
async def test_refund_translates_stripe_errors(error, expected):
    service, client = _service()
    client.refunds.error = error

    with pytest.raises(expected):
        await service.refund("pi_123")
