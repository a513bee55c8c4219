"""
Seating allocation planner

Turns an ordered guest list into planned tables without touching the
database. Two entry points mirror the two auto-arrange modes:

* ``plan_auto_arrange`` packs every bucket (group, or group and side) into
  tables of one size.
* ``plan_with_configs`` honours a list of table configurations: tables
  dedicated to named groups, blank open tables, and an optional final pass
  that mixes leftover guests into any free seats.

Both share an ``AllocationState`` that carries the table counter, the planned
tables and who has been seated, so phases can be composed and inspected.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from app.services.bin_packing import (
    BucketKey,
    GroupingStrategy,
    fill_table,
    group_guests,
    pack_guests,
)
from app.services.guest_selection import Category, GuestRecord, total_seats
from app.services.labels import LabelLookup, make_label_lookup
from app.services.layout import Canvas, grid_positions
from app.services.seat_geometry import SeatingArrangement, TableShape

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class TableConfig:
    shape: TableShape = TableShape.CIRCLE
    capacity: int = 10
    count: int = 1
    width: int = 120
    height: int = 120
    group_assignments: Tuple[str, ...] = ()
    arrangement: SeatingArrangement = SeatingArrangement.EVEN

    @property
    def is_group_exclusive(self) -> bool:
        return bool(self.group_assignments)

@dataclass
class PlannedTable:
    name: str
    capacity: int
    shape: TableShape
    arrangement: SeatingArrangement
    width: int
    height: int
    guests: List[GuestRecord] = field(default_factory=list)
    group: Optional[str] = None
    position: Optional[Tuple[int, int]] = None

    @property
    def seats_used(self) -> int:
        return total_seats(self.guests)

    @property
    def over_capacity(self) -> int:
        return max(0, self.seats_used - self.capacity)

@dataclass(frozen=True)
class ExistingTable:
    """A table that was already in the event before this run"""

    id: int
    capacity: int
    occupant_ids: Tuple[int, ...] = ()

@dataclass
class AllocationState:
    next_table_number: int = 1
    tables: List[PlannedTable] = field(default_factory=list)
    seated_ids: Set[int] = field(default_factory=set)
    # guests mixed into tables that existed before the run, by table id
    existing_fills: Dict[int, List[GuestRecord]] = field(default_factory=dict)

    def new_table(self, label: str, config: TableConfig, group: Optional[str] = None) -> PlannedTable:
        table = PlannedTable(
            name=f"{self.next_table_number} - {label}",
            capacity=config.capacity,
            shape=TableShape(config.shape),
            arrangement=SeatingArrangement(config.arrangement),
            width=config.width,
            height=config.height,
            group=group,
        )
        self.next_table_number += 1
        self.tables.append(table)
        return table

    def seat(self, table: PlannedTable, guests: Sequence[GuestRecord]) -> None:
        table.guests.extend(guests)
        self.seated_ids.update(guest.id for guest in guests)

@dataclass(frozen=True)
class AllocationSummary:
    tables_created: int
    guests_seated: int
    remaining_unseated: int

    def as_dict(self) -> dict:
        return {
            "tables_created": self.tables_created,
            "guests_seated": self.guests_seated,
            "remaining_unseated": self.remaining_unseated,
        }

def summarize(state: AllocationState, candidates: Sequence[GuestRecord]) -> AllocationSummary:
    seated = sum(1 for guest in candidates if guest.id in state.seated_ids)
    return AllocationSummary(
        tables_created=len(state.tables),
        guests_seated=seated,
        remaining_unseated=len(candidates) - seated,
    )

def place_tables(state: AllocationState, canvas: Canvas, start_index: int = 0) -> None:
    """Give every planned table a default grid position on the canvas"""
    positions = grid_positions([(t.width, t.height) for t in state.tables], canvas, start_index)
    for table, position in zip(state.tables, positions):
        table.position = position

def plan_auto_arrange(
    ordered: Sequence[GuestRecord],
    config: TableConfig,
    strategy: GroupingStrategy = GroupingStrategy.GROUP_ONLY,
    labels: Optional[LabelLookup] = None,
    overflow_allowance: bool = True,
    state: Optional[AllocationState] = None,
) -> AllocationState:
    """Pack each bucket of guests into tables of ``config.capacity`` seats"""
    labels = labels or make_label_lookup()
    state = state or AllocationState()

    for bucket in group_guests(ordered, strategy):
        bins, unplaced = pack_guests(bucket.guests, config.capacity, overflow_allowance)
        for table_bin in bins:
            table = state.new_table(labels(bucket.key), config, group=bucket.key.group.value)
            state.seat(table, table_bin.guests)
        if unplaced:
            logger.info("%d guests in %s do not fit a %d-seat table", len(unplaced), bucket.key, config.capacity)
    return state

def allocate_group_tables(
    groups: Sequence[str],
    seats_needed: Mapping[str, int],
    capacity: int,
    budget: int,
) -> Dict[str, int]:
    """Split a config's table budget across groups.

    Every group first gets one table while the budget lasts. Leftover tables
    then go round-robin, one at a time, to groups whose allocated seats are
    still below what they need.
    """
    allocation = {group: 0 for group in groups}
    for group in groups:
        if budget == 0:
            break
        allocation[group] = 1
        budget -= 1

    while budget > 0:
        awarded = False
        for group in groups:
            if budget == 0:
                break
            if allocation[group] and allocation[group] * capacity < seats_needed[group]:
                allocation[group] += 1
                budget -= 1
                awarded = True
        if not awarded:
            break
    return allocation

def _unseated(pool: Sequence[GuestRecord], state: AllocationState) -> List[GuestRecord]:
    return [guest for guest in pool if guest.id not in state.seated_ids]

def plan_group_tables(
    pool: Sequence[GuestRecord],
    config: TableConfig,
    state: AllocationState,
    labels: LabelLookup,
    assign_guests: bool = True,
    overflow_allowance: bool = True,
) -> None:
    """Dedicated tables for the config's groups, each filled only with its own group"""
    remaining = _unseated(pool, state)
    by_group: Dict[str, List[GuestRecord]] = {}
    for group in config.group_assignments:
        members = [guest for guest in remaining if guest.group_name == group]
        if members:
            by_group[group] = members

    groups = list(by_group)
    seats_needed = {group: total_seats(members) for group, members in by_group.items()}
    allocation = allocate_group_tables(groups, seats_needed, config.capacity, config.count)

    for group in groups:
        tables_for_group = allocation[group]
        if not tables_for_group:
            continue
        bins, _ = pack_guests(by_group[group], config.capacity, overflow_allowance)
        for index in range(tables_for_group):
            table = state.new_table(labels(BucketKey(Category.of(group))), config, group=group)
            if assign_guests and index < len(bins):
                state.seat(table, bins[index].guests)

def plan_open_tables(config: TableConfig, state: AllocationState, labels: LabelLookup) -> None:
    for _ in range(config.count):
        state.new_table(labels(None), config)

def mix_remaining_guests(
    pool: Sequence[GuestRecord],
    state: AllocationState,
    existing_tables: Sequence[ExistingTable] = (),
    demand_by_guest: Optional[Mapping[int, int]] = None,
    overflow_allowance: bool = True,
) -> None:
    """Fill free seats in every table with leftover guests, in seating-priority order.

    Occupants of pre-existing tables are counted with their own seat demand.
    An occupant whose demand is not known counts as one seat.
    """
    demand_by_guest = demand_by_guest or {}
    remaining = _unseated(pool, state)

    for existing in existing_tables:
        if not remaining:
            return
        used = sum(demand_by_guest.get(guest_id, 1) for guest_id in existing.occupant_ids)
        taken = fill_table(remaining, existing.capacity - used, not existing.occupant_ids, overflow_allowance)
        if taken:
            state.existing_fills.setdefault(existing.id, []).extend(taken)
            state.seated_ids.update(guest.id for guest in taken)

    for table in state.tables:
        if not remaining:
            return
        taken = fill_table(remaining, table.capacity - table.seats_used, not table.guests, overflow_allowance)
        if taken:
            state.seat(table, taken)

def plan_with_configs(
    candidates: Sequence[GuestRecord],
    configs: Sequence[TableConfig],
    existing_tables: Sequence[ExistingTable] = (),
    demand_by_guest: Optional[Mapping[int, int]] = None,
    mix_remaining: bool = True,
    assign_guests: bool = True,
    labels: Optional[LabelLookup] = None,
    overflow_allowance: bool = True,
    state: Optional[AllocationState] = None,
) -> AllocationState:
    """Plan tables for a list of configs, in three phases.

    1. Configs with group assignments get dedicated tables.
    2. Configs without group assignments become blank tables.
    3. With ``mix_remaining``, leftover guests fill any free seats, including
       seats at ``existing_tables``.
    """
    labels = labels or make_label_lookup()
    state = state or AllocationState(next_table_number=len(existing_tables) + 1)

    for config in configs:
        if config.is_group_exclusive:
            plan_group_tables(candidates, config, state, labels, assign_guests, overflow_allowance)

    for config in configs:
        if not config.is_group_exclusive:
            plan_open_tables(config, state, labels)

    if mix_remaining and assign_guests:
        mix_remaining_guests(candidates, state, existing_tables, demand_by_guest, overflow_allowance)

    return state
