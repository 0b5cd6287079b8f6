from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp
from src.rsvps.dtos import RSVPStatus


class RSVP(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (
        CheckConstraint("guest_count >= 1", name="ck_rsvps_guest_count_positive"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    guest_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    status: Mapped[str] = mapped_column(
        Enum(
            RSVPStatus,
            name="rsvp_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=RSVPStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Stripe PaymentIntent id; at most one RSVP per charge
    payment_ref: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )
    refund_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Cents
    refund_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Set on delete. The row stays so its payment_ref is never admitted again
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return f"<RSVP {self.email} x{self.guest_count} - {self.status}>"
