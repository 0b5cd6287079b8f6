from typing import Protocol

import httpx

from src.notifications.base import NotificationServiceBase
from src.notifications.notification_logger import NoOpNotificationLogger, NotificationLogger

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendConfig(Protocol):
    resend_api_key: str
    emails_from: str
    sms_gateway_domain: str
    http_timeout_seconds: float


class ResendNotificationService(NotificationServiceBase):
    def __init__(
        self,
        config: ResendConfig,
        notification_logger: NotificationLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class
        self.from_address = config.emails_from
        self.sms_gateway_domain = config.sms_gateway_domain
        self.notification_logger = notification_logger or NoOpNotificationLogger()

    async def _deliver(
        self,
        to_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
    ) -> str:
        """Send via the Resend HTTP API and return Resend's email id."""
        payload = {
            "from": self.from_address,
            "to": [to_address],
            "subject": subject,
            "text": text_body,
        }
        if html_body:
            payload["html"] = html_body

        async with self._http_client_class(timeout=self._config.http_timeout_seconds) as client:
            response = await client.post(
                RESEND_EMAILS_URL,
                headers={
                    "Authorization": f"Bearer {self._config.resend_api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            response.raise_for_status()
            return response.json().get("id")
