from src.config.settings import settings
from src.notifications.base import DeliveryError, NotificationServiceBase, sms_gateway_address
from src.notifications.dtos import NotificationChannel, NotificationStatus
from src.notifications.notification_logger import SQLNotificationLogger
from src.notifications.resend_service import ResendNotificationService
from src.notifications.smtp_service import SMTPNotificationService
from src.notifications.templates import NotificationTemplates


def get_notification_service() -> NotificationServiceBase:
    notification_logger = SQLNotificationLogger()
    if settings.resend_api_key:
        return ResendNotificationService(config=settings, notification_logger=notification_logger)
    return SMTPNotificationService(config=settings, notification_logger=notification_logger)


__all__ = [
    "DeliveryError",
    "NotificationChannel",
    "NotificationServiceBase",
    "NotificationStatus",
    "NotificationTemplates",
    "get_notification_service",
    "sms_gateway_address",
]
