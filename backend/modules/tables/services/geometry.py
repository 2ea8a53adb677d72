# backend/modules/tables/services/geometry.py

"""
Placement checks for table rectangles on a floor plan grid.

All coordinates are grid units. A rectangle covers
[x, x + width] x [y, y + height] and must keep ``margin`` units of clearance
from every floor edge so staff can walk around the outermost tables.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

EDGE_MARGIN = 2


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class FloorBounds:
    width: int
    height: int


@dataclass(frozen=True)
class Violation:
    edge: str
    message: str


def validate_placement(
    rect: Rect, floor: FloorBounds, margin: int = EDGE_MARGIN
) -> List[Violation]:
    """Return every edge-clearance violation of ``rect``; empty when it fits."""
    violations = []

    if rect.x < margin:
        violations.append(
            Violation("left", f"Table is closer than {margin} units to the left edge")
        )
    if rect.y < margin:
        violations.append(
            Violation("top", f"Table is closer than {margin} units to the top edge")
        )
    if rect.right > floor.width - margin:
        violations.append(
            Violation("right", f"Table is closer than {margin} units to the right edge")
        )
    if rect.bottom > floor.height - margin:
        violations.append(
            Violation("bottom", f"Table is closer than {margin} units to the bottom edge")
        )

    return violations


def rectangles_overlap(a: Rect, b: Rect) -> bool:
    """Interior overlap; rectangles that only share an edge do not overlap."""
    return a.x < b.right and b.x < a.right and a.y < b.bottom and b.y < a.bottom


def find_overlaps(rects: Sequence[Rect]) -> List[Tuple[int, int]]:
    """Index pairs (i < j) of overlapping rectangles."""
    pairs = []
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            if rectangles_overlap(rects[i], rects[j]):
                pairs.append((i, j))
    return pairs
