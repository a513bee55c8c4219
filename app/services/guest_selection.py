"""
Guest selection, seat demand and seating-priority ordering
"""

import locale
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

class RsvpStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    PENDING = "PENDING"
    DECLINED = "DECLINED"

# Confirmed guests fill tables before uncertain ones within a bucket
RSVP_PRIORITY = {
    RsvpStatus.ACCEPTED: 0,
    RsvpStatus.PENDING: 1,
    RsvpStatus.DECLINED: 2,
}

DEFAULT_RSVP_STATUSES = frozenset({RsvpStatus.ACCEPTED, RsvpStatus.PENDING})

@dataclass(frozen=True)
class Category:
    """A free-form categorical value (side, group) with an unknown bucket that sorts last"""

    value: Optional[str] = None

    @classmethod
    def of(cls, raw: Optional[str]) -> "Category":
        if raw is None or not str(raw).strip():
            return cls(None)
        return cls(str(raw))

    @property
    def is_unknown(self) -> bool:
        return self.value is None

    def sort_key(self):
        if self.value is None:
            return (1, "")
        return (0, locale.strxfrm(self.value.casefold()))

    def __str__(self) -> str:
        return "(none)" if self.value is None else self.value

@dataclass(frozen=True)
class GuestRecord:
    """Plain guest data consumed by the allocator"""

    id: int
    name: str
    side: Optional[str] = None
    group_name: Optional[str] = None
    expected_guests: int = 1
    rsvp_status: Optional[RsvpStatus] = None
    rsvp_guest_count: int = 0

    @classmethod
    def from_model(cls, guest) -> "GuestRecord":
        rsvp = getattr(guest, "rsvp", None)
        return cls(
            id=guest.id,
            name=guest.name,
            side=guest.side,
            group_name=guest.group_name,
            expected_guests=guest.expected_guests or 1,
            rsvp_status=RsvpStatus(rsvp.status) if rsvp is not None and rsvp.status else None,
            rsvp_guest_count=(rsvp.guest_count or 0) if rsvp is not None else 0,
        )

    @property
    def status(self) -> RsvpStatus:
        """RSVP status, treating a missing RSVP as pending"""
        return self.rsvp_status or RsvpStatus.PENDING

    @property
    def group(self) -> Category:
        return Category.of(self.group_name)

    @property
    def side_category(self) -> Category:
        return Category.of(self.side)

    @property
    def seats_needed(self) -> int:
        return seat_demand(self.rsvp_status, self.rsvp_guest_count, self.expected_guests)

def seat_demand(status: Optional[RsvpStatus], guest_count: Optional[int], expected_guests: Optional[int]) -> int:
    """Seats a guest's party occupies.

    DECLINED takes no seats, ACCEPTED takes the confirmed count and anything
    else falls back to the pre-RSVP estimate. Zero or unset counts mean 1.
    """
    if status == RsvpStatus.DECLINED:
        return 0
    if status == RsvpStatus.ACCEPTED:
        return guest_count or 1
    return expected_guests or 1

def total_seats(guests: Iterable[GuestRecord]) -> int:
    return sum(guest.seats_needed for guest in guests)

@dataclass(frozen=True)
class GuestFilter:
    """Which guests take part in an allocation run. ``None`` or "all" means no restriction."""

    side: Optional[str] = None
    group_name: Optional[str] = None
    rsvp_statuses: FrozenSet[RsvpStatus] = field(default_factory=lambda: DEFAULT_RSVP_STATUSES)

    def matches(self, guest: GuestRecord) -> bool:
        if guest.status not in self.rsvp_statuses:
            return False
        if self.side not in (None, "all") and guest.side != self.side:
            return False
        if self.group_name not in (None, "all") and guest.group_name != self.group_name:
            return False
        return True

def select_guests(guests: Iterable[GuestRecord], guest_filter: Optional[GuestFilter] = None) -> List[GuestRecord]:
    guest_filter = guest_filter or GuestFilter()
    return [guest for guest in guests if guest_filter.matches(guest)]

def seating_priority_key(guest: GuestRecord):
    # group, side, RSVP priority, then name
    return (
        guest.group.sort_key(),
        guest.side_category.sort_key(),
        RSVP_PRIORITY[guest.status],
        locale.strxfrm(guest.name.casefold()),
        guest.name,
    )

def order_guests(guests: Iterable[GuestRecord]) -> List[GuestRecord]:
    return sorted(guests, key=seating_priority_key)
