import pytest
from sqlalchemy import select

from src.notifications.dtos import NotificationChannel, NotificationStatus
from src.notifications.notification_logger import SQLNotificationLogger
from src.notifications.orm_models import NotificationLog
from src.notifications.status_updater import SQLNotificationStatusUpdater


async def _log_sent(db_session, provider_message_id="resend-123") -> NotificationLog:
    notification_logger = SQLNotificationLogger(session_overwrite=db_session)
    log_uuid = await notification_logger.log_attempt(
        channel=NotificationChannel.EMAIL,
        recipient="gaby@example.com",
        from_address="party@example.com",
        subject="RSVP Confirmed",
        html_body="<p>hi</p>",
        text_body="hi",
    )
    await notification_logger.log_success(log_uuid, provider_message_id)
    return await db_session.get(NotificationLog, log_uuid)


@pytest.mark.asyncio
async def test_logger_records_attempt_and_success(db_session):
    notification_log = await _log_sent(db_session)

    assert notification_log.status == NotificationStatus.SENT
    assert notification_log.provider_message_id == "resend-123"
    assert notification_log.channel == NotificationChannel.EMAIL


@pytest.mark.asyncio
async def test_logger_records_failure(db_session):
    notification_logger = SQLNotificationLogger(session_overwrite=db_session)
    log_uuid = await notification_logger.log_attempt(
        channel=NotificationChannel.SMS,
        recipient="5125550100@txt.example",
        from_address="party@example.com",
        subject="Party Confirmation",
        html_body=None,
        text_body="hi",
    )

    await notification_logger.log_failure(log_uuid, "HTTP 422")

    result = await db_session.execute(select(NotificationLog))
    notification_log = result.scalar_one()
    assert notification_log.status == NotificationStatus.FAILED
    assert notification_log.error_message == "HTTP 422"


@pytest.mark.asyncio
async def test_status_updater_applies_delivery_events(db_session):
    notification_log = await _log_sent(db_session)
    updater = SQLNotificationStatusUpdater(session_overwrite=db_session)

    assert await updater.update_status("resend-123", "email.delivered", {})

    assert notification_log.status == NotificationStatus.DELIVERED
    assert notification_log.last_webhook_event == "email.delivered"
    assert notification_log.last_webhook_at is not None


@pytest.mark.asyncio
async def test_status_updater_records_bounce_reason(db_session):
    notification_log = await _log_sent(db_session)
    updater = SQLNotificationStatusUpdater(session_overwrite=db_session)

    await updater.update_status(
        "resend-123",
        "email.bounced",
        {"bounce": {"type": "Permanent", "message": "Mailbox does not exist"}},
    )

    assert notification_log.status == NotificationStatus.BOUNCED
    assert notification_log.error_message == "Bounced: Permanent - Mailbox does not exist"


@pytest.mark.asyncio
async def test_status_updater_ignores_unknown_events_and_messages(db_session):
    await _log_sent(db_session)
    updater = SQLNotificationStatusUpdater(session_overwrite=db_session)

    assert not await updater.update_status("resend-123", "email.opened", {})
    assert not await updater.update_status("resend-unknown", "email.delivered", {})
