"""Deterministic "content of the day" rotation.

Maps a calendar date (or any discrete integer index) to a stable position
in an ordered list. The mapping is a pure function of (date, length):
no cursor is stored, so every process and every locale computes the same
index for the same day.

The day ordinal is the proleptic Gregorian ordinal (date.toordinal(),
i.e. days since 0001-01-01 plus one). Unlike day-of-year it keeps
advancing across year boundaries, so consecutive days always select
consecutive positions, including 31 December -> 1 January.

Python 3.13+.
"""

from __future__ import annotations

from datetime import date, datetime

__all__ = ["day_ordinal", "select_index"]


def day_ordinal(value: date | datetime | int) -> int:
    """Integer ordinal of a day.

    Args:
        value: date, datetime (time of day is ignored) or a precomputed
            integer index, which is returned unchanged

    Returns:
        Day ordinal

    Raises:
        TypeError: If value is not a date, datetime or int
    """
    # bool is an int subclass but never a meaningful day index
    if isinstance(value, bool):
        msg = "Rotation index must be a date, datetime or int, got bool"
        raise TypeError(msg)
    match value:
        case datetime():
            return value.date().toordinal()
        case date():
            return value.toordinal()
        case int():
            return value
        case _:
            msg = f"Rotation index must be a date, datetime or int, got {type(value).__name__}"
            raise TypeError(msg)


def select_index(value: date | datetime | int, length: int) -> int:
    """Stable list index for a day.

    Two lists of equal length always get the same index for the same day,
    so translations of one list rotate in sync.

    Args:
        value: Day to select for (see day_ordinal)
        length: Length of the list being rotated

    Returns:
        Index in range(length)

    Raises:
        ValueError: If length is not positive

    Example:
        >>> select_index(date(2024, 1, 15), 7)
        1
    """
    if length <= 0:
        msg = f"Rotation requires a non-empty list, got length {length}"
        raise ValueError(msg)
    return day_ordinal(value) % length
