"""Capacity gate.

Pure functions over the current set of RSVPs. Callers must pass a freshly
listed set every time; nothing here caches a count.
"""

from collections.abc import Iterable

from src.rsvps.dtos import RSVPDTO
from src.rsvps.errors import CapacityExceededError, InvalidGuestCountError

GUEST_CAPACITY = 80
MIN_GUESTS_PER_RSVP = 1
MAX_GUESTS_PER_RSVP = 10


def admitted_guests(rsvps: Iterable[RSVPDTO]) -> int:
    return sum(rsvp.guest_count for rsvp in rsvps if rsvp.counts_toward_capacity)


def remaining_capacity(rsvps: Iterable[RSVPDTO], capacity: int = GUEST_CAPACITY) -> int:
    return max(capacity - admitted_guests(rsvps), 0)


def is_valid_guest_count(
    guest_count: int,
    minimum: int = MIN_GUESTS_PER_RSVP,
    maximum: int = MAX_GUESTS_PER_RSVP,
) -> bool:
    return minimum <= guest_count <= maximum


def can_admit(
    requested_guests: int,
    remaining: int,
    minimum: int = MIN_GUESTS_PER_RSVP,
    maximum: int = MAX_GUESTS_PER_RSVP,
) -> bool:
    if not is_valid_guest_count(requested_guests, minimum, maximum):
        return False
    return requested_guests <= remaining


def check_admission(
    requested_guests: int,
    remaining: int,
    minimum: int = MIN_GUESTS_PER_RSVP,
    maximum: int = MAX_GUESTS_PER_RSVP,
) -> None:
    """Raise if ``requested_guests`` cannot be admitted against ``remaining``."""
    if not is_valid_guest_count(requested_guests, minimum, maximum):
        raise InvalidGuestCountError(requested_guests, minimum, maximum)
    if requested_guests > remaining:
        raise CapacityExceededError(requested=requested_guests, remaining=remaining)
