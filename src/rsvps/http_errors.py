"""Translate domain and payment errors into HTTP responses."""

from fastapi import HTTPException, status

from src.payments.errors import (
    CardDeclinedError,
    InvalidPaymentRequestError,
    PaymentBridgeUnavailableError,
    PaymentError,
)
from src.rsvps.errors import (
    CapacityExceededError,
    DuplicatePaymentRefError,
    NoPaymentOnRecordError,
    RSVPError,
    RSVPNotFoundError,
    ValidationError,
)

ERROR_STATUS_CODES: list[tuple[type[Exception], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (RSVPNotFoundError, status.HTTP_404_NOT_FOUND),
    (NoPaymentOnRecordError, status.HTTP_400_BAD_REQUEST),
    (DuplicatePaymentRefError, status.HTTP_409_CONFLICT),
    (CardDeclinedError, status.HTTP_402_PAYMENT_REQUIRED),
    (InvalidPaymentRequestError, status.HTTP_400_BAD_REQUEST),
    (PaymentBridgeUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def to_http_exception(error: RSVPError | PaymentError) -> HTTPException:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
