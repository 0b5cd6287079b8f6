from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.notifications.dtos import NotificationChannel, NotificationStatus


class NotificationLogger(ABC):
    """Abstract base class for logging notification sending operations."""

    @abstractmethod
    async def log_attempt(
        self,
        channel: NotificationChannel,
        recipient: str,
        from_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
        rsvp_id: UUID | None = None,
    ) -> UUID:
        """
        Log a sending attempt before handing it to the provider.

        Returns:
            UUID of the created log entry
        """
        pass

    @abstractmethod
    async def log_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        """Mark the entry as sent and store the provider's message id."""
        pass

    @abstractmethod
    async def log_failure(self, log_uuid: UUID, error_message: str) -> None:
        """Mark the entry as failed."""
        pass


class SQLNotificationLogger(NotificationLogger):
    """SQL database implementation of NotificationLogger."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self.session_overwrite = session_overwrite

    async def log_attempt(
        self,
        channel: NotificationChannel,
        recipient: str,
        from_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
        rsvp_id: UUID | None = None,
    ) -> UUID:
        from src.notifications.orm_models import NotificationLog

        notification_log = NotificationLog(
            channel=channel,
            recipient=recipient,
            from_address=from_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            rsvp_id=rsvp_id,
            status=NotificationStatus.PENDING,
        )

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            session.add(notification_log)
            await session.flush()
            await session.refresh(notification_log)
            return notification_log.uuid

    async def log_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        from src.notifications.orm_models import NotificationLog

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            notification_log = await session.get(NotificationLog, log_uuid)
            if notification_log:
                notification_log.provider_message_id = provider_message_id
                notification_log.status = NotificationStatus.SENT

    async def log_failure(self, log_uuid: UUID, error_message: str) -> None:
        from src.notifications.orm_models import NotificationLog

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            notification_log = await session.get(NotificationLog, log_uuid)
            if notification_log:
                notification_log.status = NotificationStatus.FAILED
                notification_log.error_message = error_message


class NoOpNotificationLogger(NotificationLogger):
    """No-op implementation for testing or when logging is disabled."""

    async def log_attempt(
        self,
        channel: NotificationChannel,
        recipient: str,
        from_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
        rsvp_id: UUID | None = None,
    ) -> UUID:
        return uuid4()

    async def log_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        pass

    async def log_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass
