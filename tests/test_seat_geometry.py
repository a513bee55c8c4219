"""
Tests for seat position calculation
"""

import pytest

from app.services.seat_geometry import (
    SeatingArrangement,
    TableShape,
    available_arrangements,
    calculate_seat_positions,
    rebind_seats,
    seat_relative_to_absolute,
)

def test_round_table_seats_evenly_spaced_from_top():
    seats = calculate_seat_positions(8, TableShape.CIRCLE)

    assert [s.seat_number for s in seats] == list(range(1, 9))
    assert [s.angle for s in seats] == [0, 45, 90, 135, 180, 225, 270, 315]
    assert (seats[0].relative_x, seats[0].relative_y) == (0.0, -0.5)
    assert (seats[2].relative_x, seats[2].relative_y) == (0.5, 0.0)
    assert (seats[4].relative_x, seats[4].relative_y) == (0.0, 0.5)

def test_oval_table_uses_round_layout():
    assert calculate_seat_positions(6, TableShape.OVAL) == calculate_seat_positions(6, TableShape.CIRCLE)

def test_rectangle_seats_follow_edge_lengths():
    """A 2:1 table with 6 seats gets 2 on each long side and 1 on each end"""
    seats = calculate_seat_positions(6, TableShape.RECTANGLE, width=200, height=100)
    coords = [(s.relative_x, s.relative_y, s.angle) for s in seats]

    assert coords == [
        (-0.25, -0.5, 0),
        (0.25, -0.5, 0),
        (0.5, 0.0, 90),
        (0.25, 0.5, 180),
        (-0.25, 0.5, 180),
        (-0.5, 0.0, 270),
    ]

def test_rectangle_largest_remainder_split():
    seats = calculate_seat_positions(10, TableShape.RECTANGLE, width=200, height=100)
    by_angle = {}
    for seat in seats:
        by_angle[seat.angle] = by_angle.get(seat.angle, 0) + 1

    assert by_angle == {0: 3, 90: 2, 180: 3, 270: 2}

def test_square_seats_never_on_corners():
    for capacity in range(1, 15):
        seats = calculate_seat_positions(capacity, TableShape.SQUARE, width=100, height=100)
        assert len(seats) == capacity
        for seat in seats:
            assert not (abs(seat.relative_x) == 0.5 and abs(seat.relative_y) == 0.5)

def test_square_with_two_seats_faces_across():
    seats = calculate_seat_positions(2, TableShape.SQUARE)
    assert [s.angle for s in seats] == [0, 180]

def test_sides_only_uses_long_sides():
    seats = calculate_seat_positions(7, TableShape.RECTANGLE, SeatingArrangement.SIDES_ONLY)

    assert len(seats) == 7
    assert all(abs(s.relative_y) == 0.5 for s in seats)
    assert sum(1 for s in seats if s.relative_y < 0) == 4
    assert all(s.side is None for s in seats)

def test_bride_side_tags_each_long_side():
    seats = calculate_seat_positions(6, TableShape.RECTANGLE, SeatingArrangement.BRIDE_SIDE)

    assert [s.side for s in seats] == ["bride"] * 3 + ["groom"] * 3

def test_unsupported_arrangement_falls_back_to_even():
    assert calculate_seat_positions(6, TableShape.CIRCLE, SeatingArrangement.SIDES_ONLY) == \
        calculate_seat_positions(6, TableShape.CIRCLE, SeatingArrangement.EVEN)

def test_available_arrangements():
    assert available_arrangements(TableShape.CIRCLE) == [SeatingArrangement.EVEN]
    assert SeatingArrangement.BRIDE_SIDE in available_arrangements(TableShape.RECTANGLE)

def test_zero_capacity_has_no_seats():
    assert calculate_seat_positions(0, TableShape.CIRCLE) == []

def test_layout_is_deterministic():
    first = calculate_seat_positions(11, "rectangle", "even", 180, 90)
    second = calculate_seat_positions(11, "rectangle", "even", 180, 90)
    assert first == second

def test_rebind_keeps_surviving_seat_numbers():
    positions = calculate_seat_positions(4, TableShape.CIRCLE)
    bound, dropped = rebind_seats({1: 10, 2: None, 5: 11}, positions)

    assert [(p.seat_number, guest_id) for p, guest_id in bound] == [(1, 10), (2, None), (3, None), (4, None)]
    assert dropped == [11]

def test_seat_relative_to_absolute():
    assert seat_relative_to_absolute(0.5, 0.0, 100, 100, 200, 100) == (300, 150)

    x, y = seat_relative_to_absolute(0.5, 0.0, 100, 100, 200, 100, table_rotation=90)
    assert x == pytest.approx(200)
    assert y == pytest.approx(250)
