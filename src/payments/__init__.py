from functools import lru_cache

from src.config.settings import settings
from src.payments.base import ChargeDTO, PaymentRefundDTO, PaymentServiceBase
from src.payments.stripe_service import StripePaymentService


@lru_cache
def get_payment_service() -> PaymentServiceBase:
    # One Stripe client, and so one connection pool, per process
    return StripePaymentService(config=settings)


__all__ = [
    "ChargeDTO",
    "PaymentRefundDTO",
    "PaymentServiceBase",
    "get_payment_service",
]
