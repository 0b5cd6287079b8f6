import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from uuid import UUID

from src.notifications.dtos import NotificationChannel
from src.notifications.templates import NotificationTemplates

if TYPE_CHECKING:
    from src.notifications.notification_logger import NotificationLogger

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """A notification could not be handed to the provider."""

    def __init__(self, channel: NotificationChannel, recipient: str, reason: str) -> None:
        self.channel = channel
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to send {channel.value} to {recipient}: {reason}")


def sms_gateway_address(phone: str, gateway_domain: str) -> str:
    """Map a North American phone number onto an email-to-SMS address."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        raise ValueError(f"Unsupported phone number: {phone!r}")
    return f"{digits}@{gateway_domain}"


class NotificationServiceBase(ABC):
    """Sends guest notifications over email or SMS.

    Both channels travel as email: SMS goes through the carrier's
    email-to-SMS gateway. Subclasses only implement ``_deliver``.
    """

    from_address: str
    sms_gateway_domain: str
    notification_logger: "NotificationLogger"

    @abstractmethod
    async def _deliver(
        self,
        to_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
    ) -> str:
        """Hand the message to the provider and return its message id."""
        pass

    async def send(
        self,
        channel: NotificationChannel,
        recipient: str,
        template_data: dict,
        rsvp_id: UUID | None = None,
    ) -> str:
        """Render and send a confirmation; returns the provider message id.

        Raises:
            DeliveryError: on any rendering, addressing or provider failure
        """
        try:
            to_address = self._resolve_address(channel, recipient)
            subject, html_body, text_body = NotificationTemplates.render_confirmation(
                channel, template_data
            )
        except (KeyError, ValueError) as e:
            raise DeliveryError(channel, recipient, str(e)) from e

        log_uuid = await self.notification_logger.log_attempt(
            channel=channel,
            recipient=to_address,
            from_address=self.from_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            rsvp_id=rsvp_id,
        )

        try:
            message_id = await self._deliver(
                to_address=to_address,
                subject=subject,
                html_body=html_body,
                text_body=text_body,
            )
        except Exception as e:
            await self.notification_logger.log_failure(log_uuid=log_uuid, error_message=str(e))
            raise DeliveryError(channel, recipient, str(e)) from e

        await self.notification_logger.log_success(
            log_uuid=log_uuid, provider_message_id=message_id
        )
        logger.info(f"Sent {channel.value} confirmation to {to_address} ({message_id})")
        return message_id

    def _resolve_address(self, channel: NotificationChannel, recipient: str) -> str:
        if channel == NotificationChannel.SMS:
            return sms_gateway_address(recipient, self.sms_gateway_domain)
        if not recipient or "@" not in recipient:
            raise ValueError(f"Invalid email address: {recipient!r}")
        return recipient
