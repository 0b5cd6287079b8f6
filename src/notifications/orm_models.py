from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp
from src.notifications.dtos import NotificationChannel, NotificationStatus


class NotificationLog(Base, TimeStamp):
    __tablename__ = TableNames.NOTIFICATION_LOGS.value

    rsvp_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.RSVPS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    channel: Mapped[str] = mapped_column(
        Enum(
            NotificationChannel,
            name="notification_channel_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        index=True,
    )

    # For SMS this is the gateway address, not the raw phone number
    recipient: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    html_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_body: Mapped[str | None] = mapped_column(Text, nullable=True)

    provider_message_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, unique=True
    )
    status: Mapped[str] = mapped_column(
        Enum(
            NotificationStatus,
            name="notification_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=NotificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    last_webhook_event: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_webhook_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<NotificationLog {self.provider_message_id} {self.channel} "
            f"to={self.recipient} status={self.status}>"
        )
