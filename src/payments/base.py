from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeDTO:
    """A charge (Stripe PaymentIntent) as seen right after authorization."""

    payment_ref: str
    status: str
    amount_cents: int
    client_secret: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


@dataclass(frozen=True)
class PaymentRefundDTO:
    refund_ref: str
    amount_cents: int
    status: str


class PaymentServiceBase(ABC):
    @abstractmethod
    async def authorize(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict[str, str],
        payment_token: str | None = None,
        description: str | None = None,
    ) -> ChargeDTO:
        """Create a charge, confirming it immediately when a token is given.

        Raises:
            CardDeclinedError, InvalidPaymentRequestError,
            PaymentBridgeUnavailableError
        """
        pass

    @abstractmethod
    async def refund(
        self,
        payment_ref: str,
        amount_cents: int | None = None,
        reason: str | None = None,
    ) -> PaymentRefundDTO:
        """Refund a prior charge in full, or ``amount_cents`` of it."""
        pass
