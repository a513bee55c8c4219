"""
Seat positions around a table

Positions are relative to the table centre and scaled by the table's own
width and height, so (-0.5, -0.5) is the top-left corner and (0.5, 0.5) the
bottom-right one. ``angle`` is the direction the chair faces: 0 for a chair
above the table looking down at it, increasing clockwise.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

class TableShape(str, Enum):
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    SQUARE = "square"
    OVAL = "oval"

class SeatingArrangement(str, Enum):
    EVEN = "even"
    BRIDE_SIDE = "bride-side"
    SIDES_ONLY = "sides-only"
    CUSTOM = "custom"

# Default aspect ratio when a table has no explicit size
DEFAULT_PROPORTIONS = {
    TableShape.CIRCLE: (1, 1),
    TableShape.OVAL: (3, 2),
    TableShape.SQUARE: (1, 1),
    TableShape.RECTANGLE: (2, 1),
}

PRECISION = 6

@dataclass(frozen=True)
class SeatPosition:
    seat_number: int
    relative_x: float
    relative_y: float
    angle: float
    side: Optional[str] = None

def available_arrangements(shape: TableShape) -> List[SeatingArrangement]:
    if TableShape(shape) == TableShape.RECTANGLE:
        return [SeatingArrangement.EVEN, SeatingArrangement.BRIDE_SIDE, SeatingArrangement.SIDES_ONLY]
    return [SeatingArrangement.EVEN]

def _seat(number: int, x: float, y: float, angle: float, side: Optional[str] = None) -> SeatPosition:
    # round so identical inputs always serialize identically; +0.0 drops negative zero
    return SeatPosition(
        seat_number=number,
        relative_x=round(x, PRECISION) + 0.0,
        relative_y=round(y, PRECISION) + 0.0,
        angle=round(angle % 360, PRECISION) + 0.0,
        side=side,
    )

def _round_positions(capacity: int) -> List[SeatPosition]:
    seats = []
    for i in range(capacity):
        angle = i * 360.0 / capacity
        radians = math.radians(angle - 90)  # start at the top
        seats.append(_seat(i + 1, math.cos(radians) * 0.5, math.sin(radians) * 0.5, angle))
    return seats

def _edge_counts(capacity: int, width: float, height: float) -> Dict[str, int]:
    """Split seats across the four edges in proportion to edge length (largest remainder)"""
    lengths = {"top": width, "bottom": width, "right": height, "left": height}
    perimeter = sum(lengths.values())
    quotas = {edge: capacity * length / perimeter for edge, length in lengths.items()}
    counts = {edge: int(math.floor(quota)) for edge, quota in quotas.items()}
    leftover = capacity - sum(counts.values())
    # ties go to the long edges first, then top before bottom
    priority = ["top", "bottom", "right", "left"]
    if height > width:
        priority = ["right", "left", "top", "bottom"]
    ranked = sorted(priority, key=lambda edge: (-(quotas[edge] - counts[edge]), priority.index(edge)))
    for edge in ranked[:leftover]:
        counts[edge] += 1
    return counts

def _edge_point(edge: str, t: float) -> Tuple[float, float, float]:
    if edge == "top":
        return -0.5 + t, -0.5, 0
    if edge == "right":
        return 0.5, -0.5 + t, 90
    if edge == "bottom":
        return 0.5 - t, 0.5, 180
    return -0.5, 0.5 - t, 270

def _perimeter_positions(capacity: int, width: float, height: float) -> List[SeatPosition]:
    counts = _edge_counts(capacity, width, height)
    seats = []
    number = 1
    # clockwise from the top-left corner
    for edge in ("top", "right", "bottom", "left"):
        count = counts[edge]
        for j in range(count):
            # centre of the j-th equal segment keeps chairs off the corners
            x, y, angle = _edge_point(edge, (j + 0.5) / count)
            seats.append(_seat(number, x, y, angle))
            number += 1
    return seats

def _long_side_positions(capacity: int, tag_sides: bool) -> List[SeatPosition]:
    top_count = math.ceil(capacity / 2)
    bottom_count = capacity - top_count
    seats = []
    number = 1
    for j in range(top_count):
        x, y, angle = _edge_point("top", (j + 0.5) / top_count)
        seats.append(_seat(number, x, y, angle, "bride" if tag_sides else None))
        number += 1
    for j in range(bottom_count):
        x, y, angle = _edge_point("bottom", (j + 0.5) / bottom_count)
        seats.append(_seat(number, x, y, angle, "groom" if tag_sides else None))
        number += 1
    return seats

def calculate_seat_positions(
    capacity: int,
    shape: TableShape,
    arrangement: SeatingArrangement = SeatingArrangement.EVEN,
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> List[SeatPosition]:
    """Seat layout for a table. Pure: the same arguments always give the same list."""
    if capacity <= 0:
        return []
    shape = TableShape(shape)
    arrangement = SeatingArrangement(arrangement)
    if arrangement not in available_arrangements(shape):
        arrangement = SeatingArrangement.EVEN

    if shape in (TableShape.CIRCLE, TableShape.OVAL):
        return _round_positions(capacity)

    if arrangement == SeatingArrangement.SIDES_ONLY:
        return _long_side_positions(capacity, tag_sides=False)
    if arrangement == SeatingArrangement.BRIDE_SIDE:
        return _long_side_positions(capacity, tag_sides=True)

    default_w, default_h = DEFAULT_PROPORTIONS[shape]
    return _perimeter_positions(capacity, width or default_w, height or default_h)

def rebind_seats(
    previous: Mapping[int, Optional[int]],
    positions: List[SeatPosition],
) -> Tuple[List[Tuple[SeatPosition, Optional[int]]], List[int]]:
    """Carry guest bindings (seat number -> guest id) over to a regenerated layout.

    Returns the new seats paired with their guest, and the guests whose seat
    number no longer exists.
    """
    numbers = {position.seat_number for position in positions}
    bound = [(position, previous.get(position.seat_number)) for position in positions]
    dropped = [
        guest_id
        for number, guest_id in sorted(previous.items())
        if guest_id is not None and number not in numbers
    ]
    return bound, dropped

def seat_relative_to_absolute(
    relative_x: float,
    relative_y: float,
    table_x: float,
    table_y: float,
    table_width: float,
    table_height: float,
    table_rotation: float = 0,
) -> Tuple[float, float]:
    """Canvas coordinates of a seat, given the table's top-left position and rotation"""
    rotation = math.radians(table_rotation)
    local_x = relative_x * table_width
    local_y = relative_y * table_height
    rotated_x = local_x * math.cos(rotation) - local_y * math.sin(rotation)
    rotated_y = local_x * math.sin(rotation) + local_y * math.cos(rotation)
    return table_x + table_width / 2 + rotated_x, table_y + table_height / 2 + rotated_y
