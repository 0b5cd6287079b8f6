class PaymentError(Exception):
    """Base class for payment processor failures."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class CardDeclinedError(PaymentError):
    pass


class InvalidPaymentRequestError(PaymentError):
    pass


class PaymentBridgeUnavailableError(PaymentError):
    pass


class SignatureVerificationError(Exception):
    """Raised when an incoming payment event fails signature verification."""
