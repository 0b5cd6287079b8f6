"""Record store for RSVPs. Returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import RSVPDTO, RSVPStatus
from src.rsvps.errors import DuplicatePaymentRefError, RSVPNotFoundError
from src.rsvps.repository.orm_models import RSVP

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "email",
        "phone",
        "guest_count",
        "status",
        "payment_ref",
        "refund_ref",
        "refund_amount",
    }
)


class RSVPStore(ABC):
    """Single-table RSVP persistence.

    Every write touches one row. Capacity is enforced by the lifecycle
    controller, never here.
    """

    @abstractmethod
    async def create(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        guest_count: int,
        status: RSVPStatus = RSVPStatus.PENDING,
        payment_ref: str | None = None,
    ) -> RSVPDTO:
        """Insert a new RSVP.

        Raises:
            DuplicatePaymentRefError: a row already exists for ``payment_ref``
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, rsvp_id: UUID) -> RSVPDTO:
        """Raises RSVPNotFoundError if there is no such RSVP."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_payment_ref(self, payment_ref: str) -> RSVPDTO | None:
        """Also returns deleted RSVPs; check ``deleted_at``."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_email(self, email: str) -> list[RSVPDTO]:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> list[RSVPDTO]:
        """All RSVPs, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, rsvp_id: UUID, **patch) -> RSVPDTO:
        """Apply ``patch`` to one RSVP; raises RSVPNotFoundError if absent."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, rsvp_id: UUID) -> None:
        """Hide an RSVP from every read except ``get_by_payment_ref``.

        Raises RSVPNotFoundError if there is no such RSVP.
        """
        raise NotImplementedError


def check_patch(patch: dict) -> None:
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise TypeError(f"Cannot update RSVP fields: {', '.join(sorted(unknown))}")


class SqlRSVPStore(RSVPStore):
    """SQL implementation of the RSVP store."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        guest_count: int,
        status: RSVPStatus = RSVPStatus.PENDING,
        payment_ref: str | None = None,
    ) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = RSVP(
                name=name,
                email=email,
                phone=phone,
                guest_count=guest_count,
                status=status,
                payment_ref=payment_ref,
            )
            session.add(rsvp)
            try:
                await session.flush()
            except IntegrityError as e:
                if payment_ref is not None:
                    raise DuplicatePaymentRefError(payment_ref) from e
                raise
            await session.refresh(rsvp)
            logger.info(f"Created RSVP {rsvp.uuid} ({guest_count} guests, {status.value})")
            return RSVPDTO.from_orm(rsvp)

    async def get(self, rsvp_id: UUID) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await self._get_rsvp(session, rsvp_id)
            return RSVPDTO.from_orm(rsvp)

    async def get_by_payment_ref(self, payment_ref: str) -> RSVPDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(RSVP).where(RSVP.payment_ref == payment_ref))
            rsvp = result.scalar_one_or_none()
            return RSVPDTO.from_orm(rsvp) if rsvp else None

    async def list_by_email(self, email: str) -> list[RSVPDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RSVP)
                .where(RSVP.email == email, RSVP.deleted_at.is_(None))
                .order_by(RSVP.created_at.desc())
            )
            return [RSVPDTO.from_orm(rsvp) for rsvp in result.scalars().all()]

    async def list_all(self) -> list[RSVPDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RSVP).where(RSVP.deleted_at.is_(None)).order_by(RSVP.created_at.desc())
            )
            return [RSVPDTO.from_orm(rsvp) for rsvp in result.scalars().all()]

    async def update(self, rsvp_id: UUID, **patch) -> RSVPDTO:
        check_patch(patch)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await self._get_rsvp(session, rsvp_id)
            for key, value in patch.items():
                setattr(rsvp, key, value)
            await session.flush()
            # updated_at is set server-side
            await session.refresh(rsvp)
            return RSVPDTO.from_orm(rsvp)

    async def delete(self, rsvp_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await self._get_rsvp(session, rsvp_id)
            rsvp.deleted_at = datetime.now(UTC)
            await session.flush()
            logger.info(f"Deleted RSVP {rsvp_id}")

    async def _get_rsvp(self, session: AsyncSession, rsvp_id: UUID) -> RSVP:
        rsvp = await session.get(RSVP, rsvp_id)
        if rsvp is None or rsvp.deleted_at is not None:
            raise RSVPNotFoundError(rsvp_id)
        return rsvp
