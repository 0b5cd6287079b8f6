from uuid import uuid4

import pytest

from src.rsvps.dtos import RSVPStatus
from src.rsvps.errors import DuplicatePaymentRefError, RSVPNotFoundError
from src.rsvps.repository.store import SqlRSVPStore


@pytest.fixture
def store(db_session):
    return SqlRSVPStore(session_overwrite=db_session)


async def _create(store, email="gaby@example.com", payment_ref=None, status=RSVPStatus.PENDING):
    return await store.create(
        name="Gaby Ghoul",
        email=email,
        phone="512-555-0100",
        guest_count=2,
        status=status,
        payment_ref=payment_ref,
    )


@pytest.mark.asyncio
async def test_create_and_get(store):
    created = await _create(store, payment_ref="pi_1", status=RSVPStatus.COMPLETED)

    fetched = await store.get(created.id)

    assert fetched.id == created.id
    assert fetched.name == "Gaby Ghoul"
    assert fetched.guest_count == 2
    assert fetched.status == RSVPStatus.COMPLETED
    assert fetched.payment_ref == "pi_1"
    assert fetched.refund_ref is None
    assert fetched.created_at is not None


@pytest.mark.asyncio
async def test_new_rsvp_defaults_to_pending(store):
    created = await _create(store)

    assert created.status == RSVPStatus.PENDING
    assert created.payment_ref is None


@pytest.mark.asyncio
async def test_get_missing_rsvp(store):
    with pytest.raises(RSVPNotFoundError):
        await store.get(uuid4())


@pytest.mark.asyncio
async def test_duplicate_payment_ref_rejected(store):
    await _create(store, payment_ref="pi_dup", status=RSVPStatus.COMPLETED)

    with pytest.raises(DuplicatePaymentRefError):
        await _create(store, payment_ref="pi_dup", status=RSVPStatus.COMPLETED)


@pytest.mark.asyncio
async def test_rsvps_without_payment_ref_do_not_collide(store):
    await _create(store)
    await _create(store)

    assert len(await store.list_all()) == 2


@pytest.mark.asyncio
async def test_get_by_payment_ref(store):
    created = await _create(store, payment_ref="pi_lookup", status=RSVPStatus.COMPLETED)

    assert (await store.get_by_payment_ref("pi_lookup")).id == created.id
    assert await store.get_by_payment_ref("pi_unknown") is None


@pytest.mark.asyncio
async def test_list_by_email(store):
    await _create(store, email="a@example.com")
    await _create(store, email="a@example.com")
    await _create(store, email="b@example.com")

    rsvps = await store.list_by_email("a@example.com")

    assert len(rsvps) == 2
    assert {rsvp.email for rsvp in rsvps} == {"a@example.com"}


@pytest.mark.asyncio
async def test_update_refund_fields(store):
    created = await _create(store, payment_ref="pi_refund", status=RSVPStatus.COMPLETED)

    updated = await store.update(
        created.id,
        status=RSVPStatus.REFUNDED,
        refund_ref="re_1",
        refund_amount=8000,
    )

    assert updated.status == RSVPStatus.REFUNDED
    assert updated.refund_ref == "re_1"
    assert updated.refund_amount == 8000
    assert (await store.get(created.id)).refund_ref == "re_1"


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields(store):
    created = await _create(store)

    with pytest.raises(TypeError):
        await store.update(created.id, uuid=uuid4())


@pytest.mark.asyncio
async def test_update_missing_rsvp(store):
    with pytest.raises(RSVPNotFoundError):
        await store.update(uuid4(), name="Nobody")


@pytest.mark.asyncio
async def test_delete(store):
    created = await _create(store)

    await store.delete(created.id)

    with pytest.raises(RSVPNotFoundError):
        await store.get(created.id)
    with pytest.raises(RSVPNotFoundError):
        await store.delete(created.id)


@pytest.mark.asyncio
async def test_deleted_rsvp_keeps_its_payment_ref(store):
    created = await _create(store, payment_ref="pi_deleted", status=RSVPStatus.COMPLETED)

    await store.delete(created.id)

    tombstone = await store.get_by_payment_ref("pi_deleted")
    assert tombstone.id == created.id
    assert tombstone.deleted_at is not None
    assert not tombstone.counts_toward_capacity
    assert await store.list_all() == []
    assert await store.list_by_email(created.email) == []
    with pytest.raises(RSVPNotFoundError):
        await store.update(created.id, name="Back Again")
    with pytest.raises(DuplicatePaymentRefError):
        await _create(store, payment_ref="pi_deleted")
