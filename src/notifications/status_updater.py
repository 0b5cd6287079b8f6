from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.notifications.dtos import NotificationStatus
from src.notifications.orm_models import NotificationLog

# Map Resend event types to our statuses
EVENT_TO_STATUS = {
    "email.sent": NotificationStatus.SENT,
    "email.delivered": NotificationStatus.DELIVERED,
    "email.bounced": NotificationStatus.BOUNCED,
    "email.delivery_delayed": NotificationStatus.SENT,  # still in flight
    "email.complained": NotificationStatus.COMPLAINED,
    "email.failed": NotificationStatus.FAILED,
}


class NotificationStatusUpdater(ABC):
    """Abstract base class for updating notification delivery status."""

    @abstractmethod
    async def update_status(
        self,
        provider_message_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        """
        Update the notification log based on a provider webhook event.

        Args:
            provider_message_id: the provider's message id
            event_type: event type (email.sent, email.delivered, etc.)
            event_data: the event's data payload

        Returns:
            True if updated, False if the event is unknown or no log matches
        """
        pass


class SQLNotificationStatusUpdater(NotificationStatusUpdater):
    """SQL database implementation of NotificationStatusUpdater."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self.session_overwrite = session_overwrite

    async def update_status(
        self,
        provider_message_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        new_status = EVENT_TO_STATUS.get(event_type)
        if not new_status:
            return False

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(NotificationLog).where(
                    NotificationLog.provider_message_id == provider_message_id
                )
            )
            notification_log = result.scalar_one_or_none()

            if not notification_log:
                return False

            notification_log.status = new_status
            notification_log.last_webhook_event = event_type
            notification_log.last_webhook_at = datetime.now(UTC)

            if event_type == "email.bounced":
                bounce = event_data.get("bounce") or {}
                bounce_type = bounce.get("type") or event_data.get("bounce_type")
                bounce_reason = bounce.get("message") or event_data.get("reason")
                notification_log.error_message = f"Bounced: {bounce_type} - {bounce_reason}"

            await session.flush()
            return True


class NoOpNotificationStatusUpdater(NotificationStatusUpdater):
    """No-op implementation for testing."""

    async def update_status(
        self,
        provider_message_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        return True
