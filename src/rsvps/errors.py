"""Domain errors raised by the RSVP store and lifecycle controller.

Routers translate these into HTTP responses; the messages are shown to
guests and admins as-is.
"""

from uuid import UUID


class RSVPError(Exception):
    """Base class for RSVP domain errors."""


class ValidationError(RSVPError):
    """Client input that can never succeed as submitted."""


class InvalidGuestCountError(ValidationError):
    def __init__(self, guest_count: int, minimum: int, maximum: int) -> None:
        self.guest_count = guest_count
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Please enter a valid number of guests ({minimum}-{maximum})"
        )


class InvalidStatusTransitionError(ValidationError):
    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change RSVP status from '{current}' to '{requested}'")


class CapacityExceededError(RSVPError):
    def __init__(self, requested: int, remaining: int) -> None:
        self.requested = requested
        self.remaining = remaining
        if remaining <= 0:
            message = "Sold out! All spots have been claimed."
        else:
            message = (
                f"Only {remaining} spots remaining! Please reduce your guest count."
            )
        super().__init__(message)


class RSVPNotFoundError(RSVPError):
    def __init__(self, rsvp_id: UUID) -> None:
        self.rsvp_id = rsvp_id
        super().__init__("RSVP not found")


class NoPaymentOnRecordError(RSVPError):
    def __init__(self, rsvp_id: UUID, message: str = "No payment found for this RSVP") -> None:
        self.rsvp_id = rsvp_id
        super().__init__(message)


class NoRefundablePaymentError(NoPaymentOnRecordError):
    def __init__(self, rsvp_id: UUID, status: str) -> None:
        self.status = status
        super().__init__(
            rsvp_id, f"No refundable payment found for this RSVP (status: {status})"
        )


class DuplicatePaymentRefError(RSVPError):
    def __init__(self, payment_ref: str) -> None:
        self.payment_ref = payment_ref
        super().__init__(f"An RSVP is already recorded for payment '{payment_ref}'")
