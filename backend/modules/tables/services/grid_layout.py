# backend/modules/tables/services/grid_layout.py

"""
Deterministic grid allocation of tables on a floor plan.

Tables are laid out row by row, at most ``max_columns`` per row, with the
horizontal and vertical gaps stretched uniformly so the grid spans the floor
inside the edge margin. Identical inputs always give identical slots, which
keeps admin previews and persisted layouts in agreement.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.exceptions import LayoutOverflowError
from .geometry import EDGE_MARGIN, FloorBounds, Rect, validate_placement

MAX_COLUMNS = 3
TABLE_WIDTH = 3
TABLE_HEIGHT = 3
MIN_TABLE_GAP = 1
DEFAULT_SEATS = 4
DEFAULT_SHAPE = "rectangle"


@dataclass(frozen=True)
class LayoutSlot:
    index: int
    rect: Rect
    seats: int = DEFAULT_SEATS
    shape: str = DEFAULT_SHAPE


def grid_shape(table_count: int, max_columns: int = MAX_COLUMNS) -> Tuple[int, int]:
    """(columns, rows) for ``table_count`` tables."""
    columns = min(max_columns, table_count)
    rows = math.ceil(table_count / columns)
    return columns, rows


def required_floor_size(
    table_count: int,
    *,
    margin: int = EDGE_MARGIN,
    max_columns: int = MAX_COLUMNS,
    table_width: int = TABLE_WIDTH,
    table_height: int = TABLE_HEIGHT,
    min_gap: int = MIN_TABLE_GAP,
) -> Tuple[int, int]:
    """Smallest (width, height) that fits ``table_count`` tables."""
    if table_count <= 0:
        return 2 * margin, 2 * margin
    columns, rows = grid_shape(table_count, max_columns)
    width = 2 * margin + columns * table_width + (columns - 1) * min_gap
    height = 2 * margin + rows * table_height + (rows - 1) * min_gap
    return width, height


def _uniform_gap(extent: int, count: int, size: int, margin: int) -> int:
    if count <= 1:
        return 0
    return (extent - 2 * margin - count * size) // (count - 1)


def allocate_grid(
    floor: FloorBounds,
    table_count: int,
    *,
    margin: int = EDGE_MARGIN,
    max_columns: int = MAX_COLUMNS,
    table_width: int = TABLE_WIDTH,
    table_height: int = TABLE_HEIGHT,
    min_gap: int = MIN_TABLE_GAP,
    seats: int = DEFAULT_SEATS,
    floor_plan_id: Optional[int] = None,
) -> List[LayoutSlot]:
    """
    Lay out ``table_count`` tables on ``floor``.

    Raises:
        ValueError: negative table count
        LayoutOverflowError: the tables cannot keep ``min_gap`` between them
            and ``margin`` from the floor edges
    """
    if table_count < 0:
        raise ValueError("Table count cannot be negative")
    if table_count == 0:
        return []

    columns, rows = grid_shape(table_count, max_columns)
    gap_x = _uniform_gap(floor.width, columns, table_width, margin)
    gap_y = _uniform_gap(floor.height, rows, table_height, margin)

    def overflow() -> LayoutOverflowError:
        required_width, required_height = required_floor_size(
            table_count,
            margin=margin,
            max_columns=max_columns,
            table_width=table_width,
            table_height=table_height,
            min_gap=min_gap,
        )
        return LayoutOverflowError(
            table_count=table_count,
            required_width=max(required_width, floor.width),
            required_height=max(required_height, floor.height),
            floor_plan_id=floor_plan_id,
        )

    if (columns > 1 and gap_x < min_gap) or (rows > 1 and gap_y < min_gap):
        raise overflow()

    slots = []
    for i in range(table_count):
        row, col = divmod(i, columns)
        rect = Rect(
            x=margin + col * (table_width + gap_x),
            y=margin + row * (table_height + gap_y),
            width=table_width,
            height=table_height,
        )
        if validate_placement(rect, floor, margin):
            raise overflow()
        slots.append(LayoutSlot(index=i, rect=rect, seats=seats))

    return slots
