import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Protocol

from src.notifications.base import NotificationServiceBase
from src.notifications.notification_logger import NoOpNotificationLogger, NotificationLogger


class SMTPConfig(Protocol):
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    emails_from: str
    sms_gateway_domain: str
    http_timeout_seconds: float


class SMTPNotificationService(NotificationServiceBase):
    def __init__(
        self,
        config: SMTPConfig,
        notification_logger: NotificationLogger | None = None,
        smtp_class: type[smtplib.SMTP] = smtplib.SMTP,
    ):
        self.host = config.smtp_host
        self.port = config.smtp_port
        self.username = config.smtp_user
        self.password = config.smtp_password
        self.timeout = config.http_timeout_seconds
        self.from_address = config.emails_from
        self.sms_gateway_domain = config.sms_gateway_domain
        self.notification_logger = notification_logger or NoOpNotificationLogger()
        self._smtp_class = smtp_class

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        msg["Message-ID"] = make_msgid()

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with self._smtp_class(self.host, self.port, timeout=self.timeout) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

    async def _deliver(
        self,
        to_address: str,
        subject: str,
        html_body: str | None,
        text_body: str,
    ) -> str:
        msg = self._create_message(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )
        # smtplib blocks
        await asyncio.to_thread(self._send, msg)
        return msg["Message-ID"]
