"""Static board geometry: how many slots each column has."""

from typing import Dict

# Column heights mirror the odds of rolling each two-dice sum.
COLUMN_HEIGHTS: Dict[int, int] = {
    2: 3,
    3: 5,
    4: 7,
    5: 9,
    6: 11,
    7: 13,
    8: 11,
    9: 9,
    10: 7,
    11: 5,
    12: 3,
}

COLUMNS = tuple(sorted(COLUMN_HEIGHTS))


def is_valid_column(column) -> bool:
    return column in COLUMN_HEIGHTS


def column_height(column: int) -> int:
    """Number of slots in the column, 0 for anything off the board."""
    return COLUMN_HEIGHTS.get(column, 0)


def top_slot(column: int) -> int:
    """0-based index of the topmost slot of the column."""
    return column_height(column) - 1
