"""
Tests for the seating allocation planner
"""

from app.services.allocation import (
    AllocationState,
    ExistingTable,
    TableConfig,
    allocate_group_tables,
    place_tables,
    plan_auto_arrange,
    plan_with_configs,
    summarize,
)
from app.services.bin_packing import BucketKey, GroupingStrategy
from app.services.guest_selection import Category, GuestRecord, order_guests
from app.services.labels import make_label_lookup
from app.services.layout import Canvas

LABELS = make_label_lookup("en")

def make_guests(group, count, start, expected=1, side="bride"):
    return [
        GuestRecord(id=start + i, name=f"{group} {i:02d}", side=side, group_name=group, expected_guests=expected)
        for i in range(count)
    ]

def wedding_guests():
    return order_guests(
        make_guests("family", 6, 1) + make_guests("friends", 3, 100) + make_guests("work", 2, 200)
    )

def seated_ids(state):
    ids = [guest.id for table in state.tables for guest in table.guests]
    ids += [guest.id for guests in state.existing_fills.values() for guest in guests]
    return ids

# ---- labels ----

def test_labels():
    assert LABELS(BucketKey(Category("family"))) == "Family"
    assert LABELS(BucketKey(Category("family"), Category("groom"))) == "Family - Groom"
    assert LABELS(BucketKey(Category("Cousins"))) == "Cousins"
    assert LABELS(BucketKey(Category(None), Category(None))) == "Other - Other"
    assert LABELS(None) == "Open"
    assert make_label_lookup()(BucketKey(Category("family"))) == "משפחה"

# ---- single table size ----

def test_auto_arrange_plan_names_and_packs_each_group():
    guests = order_guests(make_guests("family", 7, 1) + make_guests("friends", 1, 100, expected=6))

    state = plan_auto_arrange(guests, TableConfig(capacity=4), labels=LABELS)

    assert [t.name for t in state.tables] == ["1 - Family", "2 - Family", "3 - Friends"]
    assert [t.seats_used for t in state.tables] == [4, 3, 6]
    assert state.tables[2].over_capacity == 2
    assert summarize(state, guests).as_dict() == {
        "tables_created": 3,
        "guests_seated": 8,
        "remaining_unseated": 0,
    }

def test_auto_arrange_plan_side_then_group():
    guests = order_guests(make_guests("family", 2, 1) + make_guests("family", 2, 10, side="groom"))

    state = plan_auto_arrange(guests, TableConfig(capacity=10), GroupingStrategy.SIDE_THEN_GROUP, LABELS)

    assert [t.name for t in state.tables] == ["1 - Family - Bride", "2 - Family - Groom"]

def test_auto_arrange_plan_without_overflow_leaves_large_party_unseated():
    guests = make_guests("family", 1, 1, expected=6)

    state = plan_auto_arrange(guests, TableConfig(capacity=4), labels=LABELS, overflow_allowance=False)

    assert state.tables == []
    assert summarize(state, guests).remaining_unseated == 1

# ---- group table budget ----

def test_every_group_gets_a_table_before_any_gets_two():
    allocation = allocate_group_tables(["a", "b", "c"], {"a": 25, "b": 5, "c": 12}, capacity=10, budget=5)
    assert allocation == {"a": 2, "b": 1, "c": 2}

def test_budget_smaller_than_group_count():
    allocation = allocate_group_tables(["a", "b", "c"], {"a": 25, "b": 5, "c": 12}, capacity=10, budget=2)
    assert allocation == {"a": 1, "b": 1, "c": 0}

def test_extra_tables_stop_once_needs_are_met():
    allocation = allocate_group_tables(["a", "b"], {"a": 25, "b": 5}, capacity=10, budget=10)
    assert allocation == {"a": 3, "b": 1}

# ---- configurations ----

def test_group_tables_are_exclusive():
    guests = wedding_guests()
    config = TableConfig(capacity=4, count=4, group_assignments=("family", "friends"))

    state = plan_with_configs(guests, [config], mix_remaining=False, labels=LABELS)

    assert [t.name for t in state.tables] == ["1 - Family", "2 - Family", "3 - Friends"]
    for table in state.tables:
        assert {guest.group_name for guest in table.guests} == {table.group}
    assert summarize(state, guests).as_dict() == {
        "tables_created": 3,
        "guests_seated": 9,
        "remaining_unseated": 2,
    }

def test_open_tables_are_created_empty():
    guests = wedding_guests()

    state = plan_with_configs(guests, [TableConfig(capacity=8, count=2)], mix_remaining=False, labels=LABELS)

    assert [t.name for t in state.tables] == ["1 - Open", "2 - Open"]
    assert all(not table.guests for table in state.tables)

def test_mix_remaining_fills_free_seats():
    guests = wedding_guests()
    configs = [
        TableConfig(capacity=4, count=4, group_assignments=("family", "friends")),
        TableConfig(capacity=4, count=1),
    ]

    state = plan_with_configs(guests, configs, labels=LABELS)

    assert [t.name for t in state.tables] == ["1 - Family", "2 - Family", "3 - Friends", "4 - Open"]
    assert [t.seats_used for t in state.tables] == [4, 4, 3, 0]
    assert {g.group_name for g in state.tables[1].guests} == {"family", "work"}
    assert summarize(state, guests).remaining_unseated == 0

def test_each_guest_is_seated_at_most_once():
    guests = wedding_guests()
    configs = [
        TableConfig(capacity=3, count=2, group_assignments=("family",)),
        TableConfig(capacity=3, count=1, group_assignments=("family", "work")),
        TableConfig(capacity=5, count=2),
    ]

    state = plan_with_configs(guests, configs, labels=LABELS)

    ids = seated_ids(state)
    assert len(ids) == len(set(ids))
    assert set(ids) <= {guest.id for guest in guests}
    assert summarize(state, guests).guests_seated == len(ids)

def test_group_without_members_gets_no_table():
    guests = wedding_guests()
    config = TableConfig(capacity=4, count=2, group_assignments=("cousins",))

    state = plan_with_configs(guests, [config], mix_remaining=False, labels=LABELS)

    assert state.tables == []

def test_oversized_party_overflows_its_group_table():
    guests = make_guests("family", 1, 1, expected=6)
    config = TableConfig(capacity=4, count=1, group_assignments=("family",))

    state = plan_with_configs(guests, [config], labels=LABELS)

    assert state.tables[0].seats_used == 6
    assert state.tables[0].over_capacity == 2

def test_tables_without_guest_assignment():
    guests = wedding_guests()
    configs = [TableConfig(capacity=4, count=3, group_assignments=("family",)), TableConfig(count=1)]

    state = plan_with_configs(guests, configs, assign_guests=False, labels=LABELS)

    assert len(state.tables) == 3
    assert seated_ids(state) == []
    assert summarize(state, guests).remaining_unseated == len(guests)

# ---- incremental runs ----

def test_existing_tables_are_filled_first():
    guests = make_guests("family", 2, 1)
    existing = ExistingTable(id=99, capacity=4, occupant_ids=(500, 501))

    state = plan_with_configs(guests, [], existing_tables=[existing], demand_by_guest={500: 2}, labels=LABELS)

    assert [g.id for g in state.existing_fills[99]] == [1]
    assert summarize(state, guests).as_dict() == {
        "tables_created": 0,
        "guests_seated": 1,
        "remaining_unseated": 1,
    }

def test_occupant_with_unknown_demand_counts_as_one_seat():
    guests = make_guests("family", 3, 1)
    existing = ExistingTable(id=7, capacity=2, occupant_ids=(700,))

    state = plan_with_configs(guests, [], existing_tables=[existing], labels=LABELS)

    assert len(state.existing_fills[7]) == 1

def test_numbering_continues_after_existing_tables():
    guests = make_guests("family", 2, 1)
    existing = [ExistingTable(id=i, capacity=10, occupant_ids=(1000 + i,)) for i in range(3)]

    state = plan_with_configs(guests, [TableConfig(count=1)], existing_tables=existing,
                              mix_remaining=False, labels=LABELS)

    assert [t.name for t in state.tables] == ["4 - Open"]

def test_place_tables_after_existing_slots():
    state = AllocationState()
    plan_with_configs([], [TableConfig(count=2)], labels=LABELS, state=state)
    canvas = Canvas(width=1200, height=800, padding=50, min_spacing=40)

    place_tables(state, canvas, start_index=2)

    assert [t.position for t in state.tables] == [(337, 210), (743, 210)]
