from dataclasses import dataclass

from src.notifications.dtos import NotificationChannel


@dataclass
class NotificationTemplates:
    CONFIRMATION_SUBJECT = "RSVP Confirmed - Welcome to the Nightmare!"
    CONFIRMATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; background-color: #0a0a0a; color: #ff6666; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #ff0000;">Welcome to the Nightmare!</h1>
            <p>RSVP confirmed for {event_name}</p>
        </div>

        <p>Hello <strong style="color: #ff0000;">{name}</strong>,</p>

        <p>Your spot has been claimed for the spookiest boat party of the year!</p>

        <div style="border: 2px solid #ff0000; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #ff0000; margin-top: 0;">Party Details</h2>
            <p><strong>Date:</strong> {event_date}</p>
            <p><strong>Boarding Time:</strong> {event_boarding_time}</p>
            <p><strong>Departure:</strong> {event_departure_time}</p>
            <p><strong>Location:</strong> {event_location}</p>
            <p><strong>Return:</strong> {event_return_time}</p>
            <p><strong>After Party:</strong> {event_after_party}</p>
            <p><strong>Guests:</strong> {guest_count}</p>
        </div>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{event_group_chat_url}" style="background-color: #25D366; color: white; padding: 15px 30px; text-decoration: none; border-radius: 25px; font-size: 18px;">
                Join the Group Chat for Updates
            </a>
        </div>

        <div style="border: 2px solid #ff0000; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h3 style="color: #ff0000; margin-top: 0;">Important Reminders</h3>
            <p>Arrive 15 minutes early for boarding.</p>
            <p>Bring your spookiest costume for the costume contest!</p>
            <p>Don't forget your ID for entry.</p>
        </div>

        <p style="font-size: 12px; text-align: center;">
            Questions? Reply to this email or ask in the group chat.
        </p>
    </body>
    </html>
    """

    CONFIRMATION_TEXT = """
    Hello {name},

    Your RSVP for {event_name} is confirmed!

    Party Details:
    - Date: {event_date}
    - Boarding Time: {event_boarding_time}
    - Departure: {event_departure_time}
    - Location: {event_location}
    - Return: {event_return_time}
    - After Party: {event_after_party}
    - Guests: {guest_count}

    Join the group chat for updates:
    {event_group_chat_url}

    Arrive 15 minutes early for boarding and don't forget your ID.

    See you on the haunted waters!
    """

    SMS_SUBJECT = "Party Confirmation"
    SMS_TEXT = (
        "CONGRATULATIONS {name_upper}! You're confirmed for {event_name}. "
        "{event_date}, boarding {event_boarding_time} at {event_location}. "
        "Guests: {guest_count} {tickets_label}. "
        "Group chat: {event_group_chat_url}"
    )

    @classmethod
    def get_confirmation_templates(cls, channel: NotificationChannel) -> tuple[str, str | None, str]:
        """Get confirmation templates for a channel.

        Returns: (subject, html_body, text_body). SMS has no html body.
        """
        if channel == NotificationChannel.SMS:
            return cls.SMS_SUBJECT, None, cls.SMS_TEXT
        return cls.CONFIRMATION_SUBJECT, cls.CONFIRMATION_HTML, cls.CONFIRMATION_TEXT

    @classmethod
    def render_confirmation(
        cls, channel: NotificationChannel, template_data: dict
    ) -> tuple[str, str | None, str]:
        """Fill the confirmation templates; a missing field raises KeyError."""
        guest_count = int(template_data.get("guest_count", 1))
        data = {
            **template_data,
            "name_upper": str(template_data.get("name", "")).upper(),
            "tickets_label": "ticket" if guest_count == 1 else "tickets",
        }
        subject, html_template, text_template = cls.get_confirmation_templates(channel)
        html_body = html_template.format(**data) if html_template else None
        return subject, html_body, text_template.format(**data)
