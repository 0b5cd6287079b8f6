from uuid import uuid4

import pytest

from src.rsvps.capacity import (
    admitted_guests,
    can_admit,
    check_admission,
    is_valid_guest_count,
    remaining_capacity,
)
from src.rsvps.dtos import RSVPDTO, RSVPStatus
from src.rsvps.errors import CapacityExceededError, InvalidGuestCountError


def _rsvp(guest_count: int, status=RSVPStatus.COMPLETED, payment_ref: str | None = "pi_1"):
    return RSVPDTO(
        id=uuid4(),
        name="Guest",
        email="guest@example.com",
        phone="",
        guest_count=guest_count,
        status=status,
        payment_ref=payment_ref,
    )


def test_only_paid_completed_rsvps_count():
    rsvps = [
        _rsvp(4),
        _rsvp(3, status=RSVPStatus.PENDING),
        _rsvp(2, status=RSVPStatus.REFUNDED),
        _rsvp(5, status=RSVPStatus.FAILED),
        _rsvp(6, payment_ref=None),
    ]

    assert admitted_guests(rsvps) == 4
    assert remaining_capacity(rsvps) == 76


def test_remaining_capacity_never_negative():
    rsvps = [_rsvp(10) for _ in range(9)]

    assert admitted_guests(rsvps) == 90
    assert remaining_capacity(rsvps) == 0


@pytest.mark.parametrize("guest_count", [0, -1, 11])
def test_invalid_guest_counts(guest_count):
    assert not is_valid_guest_count(guest_count)
    assert not can_admit(guest_count, remaining=80)
    with pytest.raises(InvalidGuestCountError):
        check_admission(guest_count, remaining=80)


def test_can_admit_up_to_remaining():
    assert can_admit(2, remaining=2)
    assert not can_admit(5, remaining=2)


def test_check_admission_reports_remaining_spots():
    with pytest.raises(CapacityExceededError) as exc_info:
        check_admission(5, remaining=2)

    assert exc_info.value.remaining == 2
    assert str(exc_info.value) == "Only 2 spots remaining! Please reduce your guest count."


def test_check_admission_when_sold_out():
    with pytest.raises(CapacityExceededError) as exc_info:
        check_admission(1, remaining=0)

    assert str(exc_info.value) == "Sold out! All spots have been claimed."


def test_invalid_guest_count_checked_before_capacity():
    with pytest.raises(InvalidGuestCountError):
        check_admission(11, remaining=0)
