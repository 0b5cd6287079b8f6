import logging
from typing import Protocol
from uuid import uuid4

import stripe

from src.payments.base import ChargeDTO, PaymentRefundDTO, PaymentServiceBase
from src.payments.errors import (
    CardDeclinedError,
    InvalidPaymentRequestError,
    PaymentBridgeUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_REFUND_REASON = "requested_by_customer"


class StripeConfig(Protocol):
    stripe_secret_key: str
    http_timeout_seconds: float


class StripePaymentService(PaymentServiceBase):
    """Payment bridge backed by the Stripe SDK's async client."""

    def __init__(
        self,
        config: StripeConfig,
        client_class: type[stripe.StripeClient] = stripe.StripeClient,
    ):
        self._config = config
        self._client = client_class(
            config.stripe_secret_key,
            http_client=stripe.HTTPXClient(timeout=config.http_timeout_seconds),
            max_network_retries=0,
        )

    async def authorize(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict[str, str],
        payment_token: str | None = None,
        description: str | None = None,
    ) -> ChargeDTO:
        params = {
            "amount": amount_cents,
            "currency": currency,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if description:
            params["description"] = description
        if payment_token:
            params["payment_method"] = payment_token
            params["confirm"] = True
            # Server-side confirmation cannot follow redirect-based methods
            params["automatic_payment_methods"]["allow_redirects"] = "never"

        try:
            intent = await self._client.v1.payment_intents.create_async(
                params, {"idempotency_key": str(uuid4())}
            )
        except stripe.CardError as e:
            logger.error(f"Card error creating payment intent: {e.user_message}")
            decline_code = e.error.decline_code if e.error else None
            raise CardDeclinedError(
                e.user_message or "Card was declined", code=decline_code or e.code
            ) from e
        except stripe.InvalidRequestError as e:
            logger.error(f"Invalid payment intent request: {e}")
            raise InvalidPaymentRequestError(e.user_message or str(e), code=e.code) from e
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating payment intent: {e}")
            raise PaymentBridgeUnavailableError(
                "Payment processor is unavailable", code=e.code
            ) from e

        logger.info(f"PaymentIntent {intent.id} created with status {intent.status}")
        return ChargeDTO(
            payment_ref=intent.id,
            status=intent.status,
            amount_cents=intent.amount,
            client_secret=intent.client_secret,
        )

    async def refund(
        self,
        payment_ref: str,
        amount_cents: int | None = None,
        reason: str | None = None,
    ) -> PaymentRefundDTO:
        params = {
            "payment_intent": payment_ref,
            "reason": reason or DEFAULT_REFUND_REASON,
        }
        if amount_cents is not None:
            params["amount"] = amount_cents

        try:
            refund = await self._client.v1.refunds.create_async(params)
        except stripe.InvalidRequestError as e:
            logger.error(f"Invalid refund request for {payment_ref}: {e}")
            raise InvalidPaymentRequestError(e.user_message or str(e), code=e.code) from e
        except stripe.StripeError as e:
            logger.error(f"Error refunding {payment_ref}: {e}")
            raise PaymentBridgeUnavailableError(
                "Payment processor is unavailable", code=e.code
            ) from e

        logger.info(f"Refund {refund.id} for {payment_ref}: {refund.status}")
        return PaymentRefundDTO(
            refund_ref=refund.id,
            amount_cents=refund.amount,
            status=refund.status,
        )
