"""
Default canvas placement for generated tables
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

@dataclass(frozen=True)
class Canvas:
    width: int
    height: int
    padding: int
    min_spacing: int

    @property
    def available_width(self) -> int:
        return max(0, self.width - 2 * self.padding)

@dataclass(frozen=True)
class GridLayout:
    columns: int
    rows: int
    cell_width: float
    cell_height: float
    horizontal_gap: float

def compute_grid(total_tables: int, max_width: int, max_height: int, canvas: Canvas) -> GridLayout:
    """Square-ish grid capped by how many columns fit across the canvas"""
    total_tables = max(1, total_tables)
    fit = canvas.available_width // (max_width + canvas.min_spacing)
    columns = max(1, min(fit, math.ceil(math.sqrt(total_tables))))
    rows = math.ceil(total_tables / columns)
    # spread the leftover width evenly so the grid is centred
    leftover = canvas.available_width - columns * max_width
    gap = max(canvas.min_spacing / 2, leftover / (columns + 1))
    return GridLayout(
        columns=columns,
        rows=rows,
        cell_width=max_width,
        cell_height=max_height + canvas.min_spacing,
        horizontal_gap=gap,
    )

def grid_positions(
    sizes: Sequence[Tuple[int, int]],
    canvas: Canvas,
    start_index: int = 0,
) -> List[Tuple[int, int]]:
    """Top-left (x, y) for each table, filling grid slots from ``start_index`` onwards.

    ``start_index`` skips slots already taken by tables that existed before
    this run. The grid is laid out for all slots, old and new.
    """
    if not sizes:
        return []
    max_width = max(width for width, _ in sizes)
    max_height = max(height for _, height in sizes)
    grid = compute_grid(start_index + len(sizes), max_width, max_height, canvas)

    positions = []
    for offset, (width, height) in enumerate(sizes):
        slot = start_index + offset
        row, column = divmod(slot, grid.columns)
        x = canvas.padding + grid.horizontal_gap + column * (grid.cell_width + grid.horizontal_gap)
        y = canvas.padding + row * grid.cell_height
        # centre smaller tables inside their cell
        x += (max_width - width) / 2
        y += (max_height - height) / 2
        positions.append((int(round(x)), int(round(y))))
    return positions
