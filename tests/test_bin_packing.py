"""
Tests for guest bucketing and table bin-packing
"""

from app.services.bin_packing import (
    BucketKey,
    GroupingStrategy,
    fill_table,
    group_guests,
    pack_guests,
)
from app.services.guest_selection import Category, GuestRecord, order_guests

def make_guest(guest_id, expected=1, group="family", side="bride", name=None):
    return GuestRecord(
        id=guest_id,
        name=name or f"Guest {guest_id:02d}",
        side=side,
        group_name=group,
        expected_guests=expected,
    )

def test_simple_group_split():
    """Seven single guests at tables of four give a table of 4 and a table of 3"""
    guests = order_guests([make_guest(i) for i in range(1, 8)])
    buckets = group_guests(guests, GroupingStrategy.GROUP_ONLY)
    assert len(buckets) == 1

    bins, unplaced = pack_guests(buckets[0].guests, 4)

    assert [len(b) for b in bins] == [4, 3]
    assert unplaced == []

def test_lone_large_party_gets_own_table():
    big = make_guest(1, expected=6, group="friends")
    bins, unplaced = pack_guests([big], 4)

    assert len(bins) == 1
    assert bins[0].guests == [big]
    assert bins[0].seats_used == 6
    assert bins[0].is_over(4)
    assert unplaced == []

def test_capacity_respected_except_for_lone_oversized_party():
    demands = [2, 3, 1, 4, 1, 5, 2, 2]
    guests = [make_guest(i, expected=d) for i, d in enumerate(demands, start=1)]

    bins, _ = pack_guests(guests, 4)

    for table_bin in bins:
        if table_bin.seats_used > 4:
            assert len(table_bin) == 1
        else:
            assert table_bin.seats_used <= 4
    assert sum(len(b) for b in bins) == len(guests)

def test_packing_keeps_order_and_closes_tables_greedily():
    guests = [make_guest(i, expected=d) for i, d in enumerate([2, 3, 1, 4, 1], start=1)]
    bins, _ = pack_guests(guests, 4)
    assert [[g.seats_needed for g in b.guests] for b in bins] == [[2], [3, 1], [4], [1]]

def test_without_overflow_allowance_oversized_party_is_unplaced():
    small_a = make_guest(1)
    big = make_guest(2, expected=6)
    small_b = make_guest(3)

    bins, unplaced = pack_guests([small_a, big, small_b], 4, overflow_allowance=False)

    assert unplaced == [big]
    assert [b.guests for b in bins] == [[small_a], [small_b]]

def test_group_only_buckets():
    guests = order_guests([
        make_guest(1, group="family", side="bride"),
        make_guest(2, group="family", side="groom"),
        make_guest(3, group="friends"),
        make_guest(4, group=None),
    ])
    buckets = group_guests(guests, GroupingStrategy.GROUP_ONLY)
    assert [b.key for b in buckets] == [
        BucketKey(Category("family")),
        BucketKey(Category("friends")),
        BucketKey(Category(None)),
    ]
    assert len(buckets[0].guests) == 2

def test_group_named_other_is_not_merged_with_missing_group():
    """A real group called "other" keeps its place; guests without a group still come last"""
    guests = order_guests([
        make_guest(1, group=None, name="No Group"),
        make_guest(2, group="zeta", name="Zed"),
        make_guest(3, group="other", name="Named Other"),
    ])
    buckets = group_guests(guests, GroupingStrategy.GROUP_ONLY)

    assert [[g.name for g in b.guests] for b in buckets] == [["Named Other"], ["Zed"], ["No Group"]]
    assert buckets[-1].key.group.is_unknown

def test_side_then_group_buckets():
    guests = order_guests([
        make_guest(1, group="family", side="bride"),
        make_guest(2, group="family", side="groom"),
        make_guest(3, group="family", side="bride"),
        make_guest(4, group="friends", side=None),
        make_guest(5, group="friends", side="other"),
    ])
    buckets = group_guests(guests, GroupingStrategy.SIDE_THEN_GROUP)

    assert [b.key for b in buckets] == [
        BucketKey(Category("family"), Category("bride")),
        BucketKey(Category("family"), Category("groom")),
        BucketKey(Category("friends"), Category("other")),
        BucketKey(Category("friends"), Category(None)),
    ]
    assert [g.id for g in buckets[0].guests] == [1, 3]
    assert str(buckets[0].key) == "family-bride"

def test_fill_table_takes_fitting_guests_in_order():
    pool = [make_guest(1, expected=3), make_guest(2, expected=2), make_guest(3, expected=1)]
    taken = fill_table(pool, remaining_capacity=3, is_empty=False)
    assert [g.id for g in taken] == [1]
    assert [g.id for g in pool] == [2, 3]

def test_fill_table_skips_parties_that_do_not_fit():
    pool = [make_guest(1, expected=3), make_guest(2, expected=2), make_guest(3, expected=1)]
    taken = fill_table(pool, remaining_capacity=2, is_empty=False)
    assert [g.id for g in taken] == [2]
    assert [g.id for g in pool] == [1, 3]

def test_fill_empty_table_admits_oversized_party():
    pool = [make_guest(1, expected=6), make_guest(2)]
    taken = fill_table(pool, remaining_capacity=4, is_empty=True)
    assert [g.id for g in taken] == [1]

def test_fill_full_table_takes_nobody():
    pool = [make_guest(1)]
    assert fill_table(pool, remaining_capacity=0, is_empty=False) == []
    assert len(pool) == 1
