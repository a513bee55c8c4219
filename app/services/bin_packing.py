"""
Grouping of ordered guests into buckets and greedy packing of buckets into tables
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from app.services.guest_selection import Category, GuestRecord

class GroupingStrategy(str, Enum):
    GROUP_ONLY = "group-only"
    SIDE_THEN_GROUP = "side-then-group"

@dataclass(frozen=True)
class BucketKey:
    """Bucket identity. ``side`` is None when buckets are not split by side."""

    group: Category
    side: Optional[Category] = None

    def __str__(self) -> str:
        if self.side is None:
            return str(self.group)
        return f"{self.group}-{self.side}"

@dataclass
class GuestBucket:
    key: BucketKey
    guests: List[GuestRecord] = field(default_factory=list)

@dataclass
class TableBin:
    """Guests destined for one table"""

    guests: List[GuestRecord] = field(default_factory=list)
    seats_used: int = 0

    def add(self, guest: GuestRecord) -> None:
        self.guests.append(guest)
        self.seats_used += guest.seats_needed

    def __len__(self) -> int:
        return len(self.guests)

    def is_over(self, table_size: int) -> bool:
        return self.seats_used > table_size

def group_guests(ordered: Iterable[GuestRecord], strategy: GroupingStrategy) -> List[GuestBucket]:
    """Bucket already-ordered guests in one pass, keeping their order"""
    buckets: Dict[BucketKey, GuestBucket] = {}
    for guest in ordered:
        if strategy == GroupingStrategy.SIDE_THEN_GROUP:
            key = BucketKey(guest.group, guest.side_category)
        else:
            key = BucketKey(guest.group)
        buckets.setdefault(key, GuestBucket(key)).guests.append(guest)
    return list(buckets.values())

def fits(seats_used: int, guest: GuestRecord, capacity: int, is_empty: bool, overflow_allowance: bool) -> bool:
    """A guest fits if the party stays within capacity, or the table is empty and overflow is allowed"""
    if seats_used + guest.seats_needed <= capacity:
        return True
    return is_empty and overflow_allowance

def pack_guests(
    guests: Iterable[GuestRecord],
    table_size: int,
    overflow_allowance: bool = True,
) -> Tuple[List[TableBin], List[GuestRecord]]:
    """Greedily pack guests, in order, into bins of ``table_size`` seats.

    With ``overflow_allowance`` a party larger than ``table_size`` still gets a
    table of its own. Without it such a party is returned as unplaced.
    """
    bins: List[TableBin] = []
    unplaced: List[GuestRecord] = []
    current = TableBin()

    for guest in guests:
        if len(current) and current.seats_used >= table_size:
            bins.append(current)
            current = TableBin()
        if fits(current.seats_used, guest, table_size, len(current) == 0, overflow_allowance):
            current.add(guest)
            continue
        if len(current) == 0:
            unplaced.append(guest)
            continue
        bins.append(current)
        current = TableBin()
        if fits(0, guest, table_size, True, overflow_allowance):
            current.add(guest)
        else:
            unplaced.append(guest)

    if len(current):
        bins.append(current)
    return bins, unplaced

def fill_table(
    pool: List[GuestRecord],
    remaining_capacity: int,
    is_empty: bool,
    overflow_allowance: bool = True,
) -> List[GuestRecord]:
    """Take guests from ``pool`` (in order) that fit the table's remaining seats.

    Guests that do not fit are skipped, so a later smaller party can still use
    the leftover seats. Taken guests are removed from ``pool``.
    """
    taken: List[GuestRecord] = []
    if remaining_capacity <= 0 and not is_empty:
        return taken
    used = 0
    for guest in list(pool):
        if taken and used >= remaining_capacity:
            break
        if fits(used, guest, remaining_capacity, is_empty and not taken, overflow_allowance):
            taken.append(guest)
            used += guest.seats_needed
            pool.remove(guest)
    return taken
