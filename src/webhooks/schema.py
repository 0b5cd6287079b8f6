from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class DeliveryEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    email_id: str | None = None
    to: list[str] = []
    subject: str | None = None


class DeliveryEvent(BaseModel):
    """A Resend email delivery-status event (email.sent, email.delivered, ...)."""

    model_config = ConfigDict(extra="allow")

    type: str
    created_at: datetime | None = None
    data: DeliveryEventData = DeliveryEventData()

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_timezone(cls, v: str | None) -> str | None:
        # Resend sends "+00" offsets which older parsers reject
        if isinstance(v, str) and v.endswith("+00"):
            return v + ":00"
        return v
