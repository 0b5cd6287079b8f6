import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.payments.errors import PaymentError
from src.rsvps.dependencies import get_lifecycle_controller
from src.rsvps.dtos import RSVPDTO, GuestInfoDTO, RSVPStatus
from src.rsvps.errors import RSVPError
from src.rsvps.http_errors import to_http_exception
from src.rsvps.lifecycle import RSVPLifecycleController
from src.rsvps.urls import CREATE_RSVP_URL, PAYMENT_INTENT_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class GuestSubmit(BaseModel):
    name: str
    email: EmailStr
    phone: str = ""
    guest_count: int


class CreateRSVPRequest(GuestSubmit):
    """Guest details plus a payment method id collected by the browser."""

    payment_token: str


class RSVPResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str
    guest_count: int
    status: RSVPStatus
    payment_ref: str | None = None
    refund_ref: str | None = None
    refund_amount: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dto(cls, rsvp: RSVPDTO) -> "RSVPResponse":
        return cls(
            id=rsvp.id,
            name=rsvp.name,
            email=rsvp.email,
            phone=rsvp.phone,
            guest_count=rsvp.guest_count,
            status=rsvp.status,
            payment_ref=rsvp.payment_ref,
            refund_ref=rsvp.refund_ref,
            refund_amount=rsvp.refund_amount,
            created_at=rsvp.created_at,
            updated_at=rsvp.updated_at,
        )


class CreateRSVPResponse(BaseModel):
    status: RSVPStatus
    payment_ref: str
    amount_cents: int
    client_secret: str | None = None
    rsvp: RSVPResponse | None = None
    notifications_sent: list[str] = []


class PaymentIntentResponse(BaseModel):
    payment_ref: str
    client_secret: str | None
    amount_cents: int
    currency: str


@router.post(PAYMENT_INTENT_URL, response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: GuestSubmit,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> PaymentIntentResponse:
    """
    Open a charge for the browser to confirm.
    The RSVP is recorded by the payment webhook once the charge succeeds.
    """
    guest_info = GuestInfoDTO(name=request.name, email=request.email, phone=request.phone)
    try:
        intent = await controller.create_payment_intent(guest_info, request.guest_count)
    except (RSVPError, PaymentError) as e:
        raise to_http_exception(e)

    return PaymentIntentResponse(
        payment_ref=intent.payment_ref,
        client_secret=intent.client_secret,
        amount_cents=intent.amount_cents,
        currency=intent.currency,
    )


@router.post(CREATE_RSVP_URL, response_model=CreateRSVPResponse)
async def create_rsvp(
    request: CreateRSVPRequest,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> CreateRSVPResponse:
    """
    Charge the guest and record the RSVP.
    When the charge needs further action (3-D Secure) the response has
    status pending and a client_secret; nothing is recorded yet.
    """
    guest_info = GuestInfoDTO(name=request.name, email=request.email, phone=request.phone)
    try:
        result = await controller.authorize_and_record(
            guest_info, request.guest_count, request.payment_token
        )
    except (RSVPError, PaymentError) as e:
        logger.info(f"RSVP for {request.email} rejected: {e}")
        raise to_http_exception(e)

    return CreateRSVPResponse(
        status=result.status,
        payment_ref=result.payment_ref,
        amount_cents=result.amount_cents,
        client_secret=result.client_secret,
        rsvp=RSVPResponse.from_dto(result.rsvp) if result.rsvp else None,
        notifications_sent=result.notifications_sent,
    )
