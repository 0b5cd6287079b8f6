import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from src.payments.errors import PaymentError
from src.rsvps.dependencies import get_lifecycle_controller, verify_admin_token
from src.rsvps.dtos import GuestInfoDTO, RefundOutcome, RSVPStatus
from src.rsvps.errors import RSVPError
from src.rsvps.features.create_rsvp.router import RSVPResponse
from src.rsvps.http_errors import to_http_exception
from src.rsvps.lifecycle import RSVPLifecycleController
from src.rsvps.urls import ADMIN_REFUND_URL, ADMIN_RSVP_URL, ADMIN_RSVPS_URL

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_admin_token)])


class RSVPCreateRequest(BaseModel):
    """Manual entry for a guest who paid outside the checkout."""

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    guest_count: int
    status: RSVPStatus = RSVPStatus.PENDING


class RSVPUpdateRequest(BaseModel):
    """Admin edit. Only the fields sent are changed."""

    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    guest_count: int | None = None
    status: RSVPStatus | None = None


class RefundRequest(BaseModel):
    amount: float | None = Field(default=None, gt=0, description="Amount in dollars")
    reason: str | None = None


class RefundResponse(BaseModel):
    message: str
    refund_id: str
    amount: int
    status: str
    rsvp: RSVPResponse


class DeleteResponse(BaseModel):
    message: str
    refund_status: RefundOutcome


@router.get(ADMIN_RSVPS_URL, response_model=list[RSVPResponse])
async def list_rsvps(
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> list[RSVPResponse]:
    rsvps = await controller.list_all()
    return [RSVPResponse.from_dto(rsvp) for rsvp in rsvps]


@router.post(ADMIN_RSVPS_URL, response_model=RSVPResponse, status_code=201)
async def create_rsvp(
    request: RSVPCreateRequest,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> RSVPResponse:
    guest_info = GuestInfoDTO(name=request.name, email=request.email, phone=request.phone)
    try:
        rsvp = await controller.create_manual(guest_info, request.guest_count, request.status)
    except RSVPError as e:
        raise to_http_exception(e)
    return RSVPResponse.from_dto(rsvp)


@router.get(ADMIN_RSVP_URL, response_model=RSVPResponse)
async def get_rsvp(
    rsvp_id: UUID,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> RSVPResponse:
    try:
        rsvp = await controller.get(rsvp_id)
    except RSVPError as e:
        raise to_http_exception(e)
    return RSVPResponse.from_dto(rsvp)


@router.put(ADMIN_RSVP_URL, response_model=RSVPResponse)
async def update_rsvp(
    rsvp_id: UUID,
    request: RSVPUpdateRequest,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> RSVPResponse:
    patch = request.model_dump(exclude_unset=True, exclude_none=True)
    try:
        rsvp = await controller.update(rsvp_id, patch)
    except RSVPError as e:
        raise to_http_exception(e)
    logger.info(f"Admin updated RSVP {rsvp_id}: {sorted(patch)}")
    return RSVPResponse.from_dto(rsvp)


@router.post(ADMIN_REFUND_URL, response_model=RefundResponse)
async def refund_rsvp(
    rsvp_id: UUID,
    request: RefundRequest | None = None,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> RefundResponse:
    """
    Refund an RSVP in full, or ``amount`` dollars of it for a partial refund.
    """
    amount_cents = None
    reason = None
    if request is not None:
        if request.amount is not None:
            amount_cents = round(request.amount * 100)
        reason = request.reason

    try:
        result = await controller.refund(rsvp_id, amount_cents=amount_cents, reason=reason)
    except (RSVPError, PaymentError) as e:
        logger.error(f"Refund for RSVP {rsvp_id} failed: {e}")
        raise to_http_exception(e)

    return RefundResponse(
        message="Refund processed successfully",
        refund_id=result.refund_ref,
        amount=result.amount_cents,
        status=result.status,
        rsvp=RSVPResponse.from_dto(result.rsvp),
    )


@router.delete(ADMIN_RSVP_URL, response_model=DeleteResponse)
async def delete_rsvp(
    rsvp_id: UUID,
    controller: RSVPLifecycleController = Depends(get_lifecycle_controller),
) -> DeleteResponse:
    """
    Delete an RSVP, refunding its payment first when there is one.
    A failed refund does not stop the deletion.
    """
    try:
        result = await controller.delete_with_refund(rsvp_id)
    except RSVPError as e:
        raise to_http_exception(e)

    return DeleteResponse(
        message="RSVP deleted successfully",
        refund_status=result.refund_status,
    )
