# backend/modules/tables/services/numbering.py

"""
Table number assignment across the floors of one restaurant.

Numbers are restaurant-wide, so floors are walked in the order the admin
sees them (floor number, then id) and share a single running counter.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_TABLES_PER_FLOOR = 50


class NumberingMode(str, Enum):
    """How table numbers are chosen when a layout is (re)generated"""

    AUTOMATIC = "automatic"
    PRESERVE = "preserve"


def validate_numbering_request(
    counts_by_floor: Mapping[int, int],
    starting_number: int,
    max_tables_per_floor: int = MAX_TABLES_PER_FLOOR,
) -> None:
    """Reject bad input before anything is written."""
    violations = []
    if starting_number < 1:
        violations.append("Starting number must be at least 1")
    for floor_id, count in counts_by_floor.items():
        if count is None or count < 1 or count > max_tables_per_floor:
            violations.append(
                f"Floor {floor_id}: table count must be between 1 and {max_tables_per_floor}"
            )
    if violations:
        raise ValidationError(
            detail="Invalid table numbering request", violations=violations
        )


def _next_free(start: int, taken: Set[int]) -> int:
    number = start
    while number in taken:
        number += 1
    return number


def assign_table_numbers(
    floors: Iterable,
    counts_by_floor: Mapping[int, int],
    mode: NumberingMode = NumberingMode.AUTOMATIC,
    starting_number: int = 1,
    existing_numbers: Optional[Mapping[int, Sequence[int]]] = None,
    max_tables_per_floor: int = MAX_TABLES_PER_FLOOR,
) -> Dict[int, List[int]]:
    """
    Assign table numbers per floor.

    Args:
        floors: objects exposing ``id`` and ``floor_number``
        counts_by_floor: requested table count keyed by floor id; floors with
            no entry are skipped
        mode: ``automatic`` numbers every floor contiguously from
            ``starting_number``; ``preserve`` keeps the numbers a floor
            already has and numbers only the new tables
        existing_numbers: current table numbers keyed by floor id, used in
            ``preserve`` mode

    Returns:
        Floor id to the ordered list of table numbers for that floor.
        Numbers never repeat across floors.
    """
    mode = NumberingMode(mode)
    validate_numbering_request(counts_by_floor, starting_number, max_tables_per_floor)

    ordered = sorted(floors, key=lambda f: (f.floor_number, f.id))
    existing_numbers = existing_numbers or {}

    kept: Dict[int, List[int]] = {}
    if mode == NumberingMode.PRESERVE:
        for floor in ordered:
            count = counts_by_floor.get(floor.id) or 0
            current = sorted(existing_numbers.get(floor.id) or [])
            if count and current:
                kept[floor.id] = current[:count]

    taken: Set[int] = {n for numbers in kept.values() for n in numbers}
    assignments: Dict[int, List[int]] = {}
    offset = starting_number

    for floor in ordered:
        count = counts_by_floor.get(floor.id) or 0
        if not count:
            continue

        numbers = list(kept.get(floor.id, []))
        while len(numbers) < count:
            offset = _next_free(offset, taken)
            numbers.append(offset)
            taken.add(offset)
            offset += 1

        if numbers:
            offset = max(offset, max(numbers) + 1)
        assignments[floor.id] = numbers

    logger.debug(f"Assigned table numbers in {mode.value} mode for {len(assignments)} floors")
    return assignments
