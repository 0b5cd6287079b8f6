from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.rsvps.dependencies import get_lifecycle_controller
from src.rsvps.dtos import GuestInfoDTO
from src.rsvps.errors import RSVPError
from src.rsvps.http_errors import to_http_exception
from src.rsvps.lifecycle import RSVPLifecycleController
from src.rsvps.urls import CAPACITY_URL, QUOTE_URL

router = APIRouter()


class CapacityResponse(BaseModel):
    capacity: int
    admitted_guests: int
    admitted_parties: int
    remaining: int
    sold_out: bool
    unit_price_cents: int
    currency: str


class QuoteRequest(BaseModel):
    name: str
    email: EmailStr
    phone: str = ""
    guest_count: int


class QuoteResponse(BaseModel):
    guest_count: int
    amount_cents: int
    currency: str
    remaining: int


@router.get(CAPACITY_URL, response_model=CapacityResponse)
async def get_capacity(
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> CapacityResponse:
    summary = await controller.capacity()
    return CapacityResponse(
        capacity=summary.capacity,
        admitted_guests=summary.admitted_guests,
        admitted_parties=summary.admitted_parties,
        remaining=summary.remaining,
        sold_out=summary.sold_out,
        unit_price_cents=summary.unit_price_cents,
        currency=summary.currency,
    )


@router.post(QUOTE_URL, response_model=QuoteResponse)
async def quote_rsvp(
    request: QuoteRequest,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> QuoteResponse:
    """
    Check that a party of ``guest_count`` fits and return its price.
    Nothing is recorded or charged.
    """
    guest_info = GuestInfoDTO(name=request.name, email=request.email, phone=request.phone)
    try:
        quote = await controller.submit(guest_info, request.guest_count)
    except RSVPError as e:
        raise to_http_exception(e)

    return QuoteResponse(
        guest_count=quote.guest_count,
        amount_cents=quote.amount_cents,
        currency=quote.currency,
        remaining=quote.remaining,
    )
