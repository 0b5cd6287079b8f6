"""RSVP lifecycle controller.

Admission runs validate -> capacity check -> charge -> record -> notify.
The payment webhook records the same admission when the synchronous path
could not, keyed by the charge's ``payment_ref`` so a charge never yields
two rows. The capacity check and the charge are not atomic: concurrent
submissions can oversell by up to (N - 1) * max guests per RSVP.
"""

import logging
from typing import Protocol
from uuid import UUID

from src.notifications import NotificationChannel, NotificationServiceBase
from src.payments.base import PaymentServiceBase
from src.payments.errors import PaymentError
from src.rsvps.capacity import (
    admitted_guests,
    check_admission,
    is_valid_guest_count,
    remaining_capacity,
)
from src.rsvps.dtos import (
    ALLOWED_TRANSITIONS,
    RSVPDTO,
    AdmissionQuoteDTO,
    AdmissionResultDTO,
    CapacityDTO,
    DeletionResultDTO,
    GuestInfoDTO,
    PaymentEventType,
    PaymentIntentDTO,
    ReconcileOutcome,
    RefundOutcome,
    RefundResultDTO,
    RSVPStatus,
)
from src.rsvps.errors import (
    DuplicatePaymentRefError,
    InvalidGuestCountError,
    InvalidStatusTransitionError,
    NoPaymentOnRecordError,
    NoRefundablePaymentError,
    ValidationError,
)
from src.rsvps.repository.store import RSVPStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"name", "email", "phone", "guest_count", "status"})


class LifecycleConfig(Protocol):
    guest_capacity: int
    min_guests_per_rsvp: int
    max_guests_per_rsvp: int
    unit_price_cents: int
    currency: str
    event_slug: str
    event_name: str
    event_date: str
    event_boarding_time: str
    event_departure_time: str
    event_return_time: str
    event_location: str
    event_after_party: str
    event_group_chat_url: str


class RSVPLifecycleController:
    def __init__(
        self,
        store: RSVPStore,
        payment_service: PaymentServiceBase,
        notification_service: NotificationServiceBase,
        config: LifecycleConfig,
    ):
        self.store = store
        self.payment_service = payment_service
        self.notification_service = notification_service
        self.config = config

    async def capacity(self) -> CapacityDTO:
        rsvps = await self.store.list_all()
        admitted = admitted_guests(rsvps)
        return CapacityDTO(
            capacity=self.config.guest_capacity,
            admitted_guests=admitted,
            admitted_parties=sum(1 for rsvp in rsvps if rsvp.counts_toward_capacity),
            remaining=remaining_capacity(rsvps, self.config.guest_capacity),
            unit_price_cents=self.config.unit_price_cents,
            currency=self.config.currency,
        )

    async def submit(self, guest_info: GuestInfoDTO, guest_count: int) -> AdmissionQuoteDTO:
        """Check that ``guest_count`` can be admitted right now.

        Nothing is written and nothing is charged.

        Raises:
            InvalidGuestCountError: outside the per-RSVP bounds
            CapacityExceededError: not enough spots left
        """
        self._check_guest_count(guest_count)
        summary = await self.capacity()
        check_admission(
            guest_count,
            summary.remaining,
            self.config.min_guests_per_rsvp,
            self.config.max_guests_per_rsvp,
        )
        return AdmissionQuoteDTO(
            guest_count=guest_count,
            amount_cents=self._amount_for(guest_count),
            currency=self.config.currency,
            remaining=summary.remaining,
        )

    async def create_payment_intent(
        self, guest_info: GuestInfoDTO, guest_count: int
    ) -> PaymentIntentDTO:
        """Open a charge the browser confirms itself; the webhook records it."""
        quote = await self.submit(guest_info, guest_count)
        charge = await self.payment_service.authorize(
            amount_cents=quote.amount_cents,
            currency=quote.currency,
            metadata=self._payment_metadata(guest_info, guest_count),
            description=self._description(guest_count),
        )
        return PaymentIntentDTO(
            payment_ref=charge.payment_ref,
            client_secret=charge.client_secret,
            amount_cents=charge.amount_cents,
            currency=quote.currency,
        )

    async def authorize_and_record(
        self,
        guest_info: GuestInfoDTO,
        guest_count: int,
        payment_token: str,
    ) -> AdmissionResultDTO:
        """Charge the guest and record the admission once the charge succeeds.

        Raises:
            InvalidGuestCountError, CapacityExceededError: before any charge
            PaymentError: the charge failed; nothing is written
        """
        quote = await self.submit(guest_info, guest_count)
        charge = await self.payment_service.authorize(
            amount_cents=quote.amount_cents,
            currency=quote.currency,
            metadata=self._payment_metadata(guest_info, guest_count),
            payment_token=payment_token,
            description=self._description(guest_count),
        )

        if not charge.succeeded:
            logger.info(
                f"Charge {charge.payment_ref} is {charge.status}; waiting for the webhook"
            )
            return AdmissionResultDTO(
                status=RSVPStatus.PENDING,
                payment_ref=charge.payment_ref,
                amount_cents=charge.amount_cents,
                client_secret=charge.client_secret,
            )

        rsvp, outcome = await self._record_admission(guest_info, guest_count, charge.payment_ref)
        sent = []
        if outcome != ReconcileOutcome.ALREADY_RECORDED:
            sent = await self._notify(rsvp)
        return AdmissionResultDTO(
            status=rsvp.status,
            payment_ref=charge.payment_ref,
            amount_cents=charge.amount_cents,
            rsvp=rsvp,
            notifications_sent=sent,
        )

    async def reconcile_async_event(
        self,
        event_type: PaymentEventType | None,
        charge_ref: str | None,
        metadata: dict[str, str],
    ) -> ReconcileOutcome:
        """Apply a verified payment event. Safe to call repeatedly."""
        if event_type == PaymentEventType.FAILED:
            logger.warning(f"Payment {charge_ref} failed; nothing to record")
            return ReconcileOutcome.IGNORED
        if event_type != PaymentEventType.SUCCEEDED or not charge_ref:
            return ReconcileOutcome.IGNORED

        existing = await self.store.get_by_payment_ref(charge_ref)
        if existing is None:
            if metadata.get("event") != self.config.event_slug:
                logger.warning(
                    f"Payment {charge_ref} belongs to event {metadata.get('event')!r}; ignoring"
                )
                return ReconcileOutcome.IGNORED
            name = metadata.get("name")
            email = metadata.get("email")
            if not name or not email:
                logger.warning(f"Payment {charge_ref} has no guest details in its metadata")
                return ReconcileOutcome.IGNORED

            guest_count = self._guest_count_from_metadata(metadata)
            summary = await self.capacity()
            if guest_count > summary.remaining:
                # The guest has already paid; record anyway and let an admin decide
                logger.warning(
                    f"Payment {charge_ref} admits {guest_count} guests with only "
                    f"{summary.remaining} spots remaining"
                )
            guest_info = GuestInfoDTO(name=name, email=email, phone=metadata.get("phone", ""))
        else:
            guest_info = GuestInfoDTO(name=existing.name, email=existing.email, phone=existing.phone)
            guest_count = existing.guest_count

        rsvp, outcome = await self._record_admission(guest_info, guest_count, charge_ref)
        if outcome != ReconcileOutcome.ALREADY_RECORDED:
            await self._notify(rsvp)
        logger.info(f"Payment {charge_ref} reconciled: {outcome.value}")
        return outcome

    async def refund(
        self,
        rsvp_id: UUID,
        amount_cents: int | None = None,
        reason: str | None = None,
    ) -> RefundResultDTO:
        """Refund a completed RSVP in full, or ``amount_cents`` of it.

        Raises:
            RSVPNotFoundError: no such RSVP
            NoPaymentOnRecordError: the RSVP has no payment reference
            NoRefundablePaymentError: the RSVP is not in the completed state
            PaymentError: the processor refused; the RSVP is unchanged
        """
        rsvp = await self.store.get(rsvp_id)
        if not rsvp.payment_ref:
            raise NoPaymentOnRecordError(rsvp_id)
        if rsvp.status != RSVPStatus.COMPLETED:
            raise NoRefundablePaymentError(rsvp_id, rsvp.status.value)

        refund = await self.payment_service.refund(
            rsvp.payment_ref, amount_cents=amount_cents, reason=reason
        )
        updated = await self.store.update(
            rsvp_id,
            status=RSVPStatus.REFUNDED,
            refund_ref=refund.refund_ref,
            refund_amount=refund.amount_cents,
        )
        logger.info(f"Refunded {refund.amount_cents} cents for RSVP {rsvp_id} ({refund.refund_ref})")
        return RefundResultDTO(
            rsvp=updated,
            refund_ref=refund.refund_ref,
            amount_cents=refund.amount_cents,
            status=refund.status,
        )

    async def create_manual(
        self,
        guest_info: GuestInfoDTO,
        guest_count: int,
        status: RSVPStatus = RSVPStatus.PENDING,
    ) -> RSVPDTO:
        """Admin entry with no charge behind it. It never counts toward capacity."""
        self._check_guest_count(guest_count)
        if status == RSVPStatus.REFUNDED:
            raise ValidationError("An RSVP without a payment cannot be refunded")

        rsvp = await self.store.create(
            name=guest_info.name,
            email=guest_info.email,
            phone=guest_info.phone,
            guest_count=guest_count,
            status=status,
        )
        logger.info(f"Admin created RSVP {rsvp.id} for {guest_count} guests ({status.value})")
        return rsvp

    async def update(self, rsvp_id: UUID, patch: dict) -> RSVPDTO:
        """Admin edit. Guest count may exceed remaining capacity here."""
        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit RSVP fields: {', '.join(sorted(unknown))}")

        if "guest_count" in patch:
            self._check_guest_count(patch["guest_count"])

        if "status" in patch:
            current = (await self.store.get(rsvp_id)).status
            requested = RSVPStatus(patch["status"])
            if requested != current:
                # refunded is only reachable through refund(), which sets the refund fields
                if requested == RSVPStatus.REFUNDED or requested not in ALLOWED_TRANSITIONS[current]:
                    raise InvalidStatusTransitionError(current.value, requested.value)
            patch = {**patch, "status": requested}

        return await self.store.update(rsvp_id, **patch)

    async def delete_with_refund(self, rsvp_id: UUID) -> DeletionResultDTO:
        """Refund what can be refunded, then delete the RSVP regardless."""
        rsvp = await self.store.get(rsvp_id)
        refund_ref = rsvp.refund_ref

        if not rsvp.payment_ref:
            outcome = RefundOutcome.NO_PAYMENT
        elif rsvp.status == RSVPStatus.REFUNDED:
            outcome = RefundOutcome.REFUNDED
        else:
            try:
                result = await self.refund(rsvp_id)
                refund_ref = result.refund_ref
                outcome = RefundOutcome.REFUNDED
            except (PaymentError, NoPaymentOnRecordError) as e:
                logger.error(f"Refund before deleting RSVP {rsvp_id} failed: {e}")
                outcome = RefundOutcome.REFUND_FAILED

        await self.store.delete(rsvp_id)
        return DeletionResultDTO(rsvp_id=rsvp_id, refund_status=outcome, refund_ref=refund_ref)

    async def get(self, rsvp_id: UUID) -> RSVPDTO:
        return await self.store.get(rsvp_id)

    async def list_all(self) -> list[RSVPDTO]:
        return await self.store.list_all()

    def template_data(self, rsvp: RSVPDTO) -> dict:
        return {
            "name": rsvp.name,
            "guest_count": rsvp.guest_count,
            "event_name": self.config.event_name,
            "event_date": self.config.event_date,
            "event_boarding_time": self.config.event_boarding_time,
            "event_departure_time": self.config.event_departure_time,
            "event_return_time": self.config.event_return_time,
            "event_location": self.config.event_location,
            "event_after_party": self.config.event_after_party,
            "event_group_chat_url": self.config.event_group_chat_url,
        }

    async def _record_admission(
        self, guest_info: GuestInfoDTO, guest_count: int, payment_ref: str
    ) -> tuple[RSVPDTO, ReconcileOutcome]:
        existing = await self.store.get_by_payment_ref(payment_ref)
        if existing is not None:
            if existing.deleted_at is not None:
                logger.info(f"Payment {payment_ref} belongs to a deleted RSVP; not recording it again")
                return existing, ReconcileOutcome.ALREADY_RECORDED
            if existing.status == RSVPStatus.PENDING:
                confirmed = await self.store.update(existing.id, status=RSVPStatus.COMPLETED)
                return confirmed, ReconcileOutcome.CONFIRMED
            return existing, ReconcileOutcome.ALREADY_RECORDED

        try:
            rsvp = await self.store.create(
                name=guest_info.name,
                email=guest_info.email,
                phone=guest_info.phone,
                guest_count=guest_count,
                status=RSVPStatus.COMPLETED,
                payment_ref=payment_ref,
            )
        except DuplicatePaymentRefError:
            # The other path recorded this charge between our read and insert
            rsvp = await self.store.get_by_payment_ref(payment_ref)
            if rsvp is None:
                raise
            return rsvp, ReconcileOutcome.ALREADY_RECORDED
        return rsvp, ReconcileOutcome.RECORDED

    async def _notify(self, rsvp: RSVPDTO) -> list[str]:
        """Send confirmations; failures are logged and never raised."""
        channels = [(NotificationChannel.EMAIL, rsvp.email)]
        if rsvp.phone and rsvp.phone.strip():
            channels.append((NotificationChannel.SMS, rsvp.phone))

        sent = []
        template_data = self.template_data(rsvp)
        for channel, recipient in channels:
            try:
                await self.notification_service.send(
                    channel, recipient, template_data, rsvp_id=rsvp.id
                )
                sent.append(channel.value)
            except Exception as e:
                logger.error(f"Could not send {channel.value} confirmation for RSVP {rsvp.id}: {e}")
        return sent

    def _check_guest_count(self, guest_count: int) -> None:
        if not is_valid_guest_count(
            guest_count, self.config.min_guests_per_rsvp, self.config.max_guests_per_rsvp
        ):
            raise InvalidGuestCountError(
                guest_count, self.config.min_guests_per_rsvp, self.config.max_guests_per_rsvp
            )

    def _amount_for(self, guest_count: int) -> int:
        return guest_count * self.config.unit_price_cents

    def _description(self, guest_count: int) -> str:
        tickets = "ticket" if guest_count == 1 else "tickets"
        return f"{self.config.event_name} - {guest_count} {tickets}"

    def _payment_metadata(self, guest_info: GuestInfoDTO, guest_count: int) -> dict[str, str]:
        return {
            "name": guest_info.name,
            "email": guest_info.email,
            "phone": guest_info.phone,
            "guest_count": str(guest_count),
            "event": self.config.event_slug,
        }

    @staticmethod
    def _guest_count_from_metadata(metadata: dict[str, str]) -> int:
        try:
            return max(int(metadata.get("guest_count", 1)), 1)
        except (TypeError, ValueError):
            return 1
