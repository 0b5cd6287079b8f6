from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.rsvps.repository.orm_models import RSVP


class RSVPStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# Lifecycle: pending -> completed -> refunded, pending -> failed. Nothing
# re-enters pending and failed/refunded are terminal.
ALLOWED_TRANSITIONS: dict[RSVPStatus, frozenset[RSVPStatus]] = {
    RSVPStatus.PENDING: frozenset({RSVPStatus.COMPLETED, RSVPStatus.FAILED}),
    RSVPStatus.COMPLETED: frozenset({RSVPStatus.REFUNDED}),
    RSVPStatus.FAILED: frozenset(),
    RSVPStatus.REFUNDED: frozenset(),
}


class RefundOutcome(str, Enum):
    """Refund result reported when an RSVP is deleted."""

    REFUNDED = "refunded"
    REFUND_FAILED = "refund_failed"
    NO_PAYMENT = "no_payment"


class ReconcileOutcome(str, Enum):
    RECORDED = "recorded"
    CONFIRMED = "confirmed"
    ALREADY_RECORDED = "already_recorded"
    IGNORED = "ignored"


class PaymentEventType(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GuestInfoDTO:
    """Contact details collected on the public RSVP form."""

    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class RSVPDTO:
    """DTO for one stored RSVP. Stores return these, never ORM models."""

    id: UUID
    name: str
    email: str
    phone: str
    guest_count: int
    status: RSVPStatus
    payment_ref: str | None = None
    refund_ref: str | None = None
    refund_amount: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def counts_toward_capacity(self) -> bool:
        # Rows without a payment reference are test or hand-inserted rows
        return (
            self.status == RSVPStatus.COMPLETED
            and self.payment_ref is not None
            and self.deleted_at is None
        )

    @classmethod
    def from_orm(cls, rsvp: "RSVP") -> "RSVPDTO":
        return cls(
            id=rsvp.uuid,
            name=rsvp.name,
            email=rsvp.email,
            phone=rsvp.phone,
            guest_count=rsvp.guest_count,
            status=RSVPStatus(rsvp.status),
            payment_ref=rsvp.payment_ref,
            refund_ref=rsvp.refund_ref,
            refund_amount=rsvp.refund_amount,
            created_at=rsvp.created_at,
            updated_at=rsvp.updated_at,
            deleted_at=rsvp.deleted_at,
        )


@dataclass(frozen=True)
class CapacityDTO:
    capacity: int
    admitted_guests: int
    admitted_parties: int
    remaining: int
    unit_price_cents: int
    currency: str

    @property
    def sold_out(self) -> bool:
        return self.remaining <= 0


@dataclass(frozen=True)
class AdmissionQuoteDTO:
    """Result of a successful capacity check, before any charge."""

    guest_count: int
    amount_cents: int
    currency: str
    remaining: int


@dataclass(frozen=True)
class PaymentIntentDTO:
    payment_ref: str
    client_secret: str | None
    amount_cents: int
    currency: str


@dataclass(frozen=True)
class AdmissionResultDTO:
    """Outcome of authorize-and-record.

    ``rsvp`` is None when the charge still needs client action; the payment
    webhook records the admission once the charge succeeds.
    """

    status: RSVPStatus
    payment_ref: str
    amount_cents: int
    rsvp: RSVPDTO | None = None
    client_secret: str | None = None
    notifications_sent: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeletionResultDTO:
    rsvp_id: UUID
    refund_status: RefundOutcome
    refund_ref: str | None = None


@dataclass(frozen=True)
class RefundResultDTO:
    rsvp: RSVPDTO
    refund_ref: str
    amount_cents: int
    status: str
