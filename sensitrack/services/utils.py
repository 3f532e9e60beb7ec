"""
Shared utility functions for cycle-related services.

These utilities are used across the detectors and the orchestrator to handle
common operations like entry ordering, temperature usability and bleeding
partitioning.
"""
from typing import Iterable, List, Optional, Tuple

from sensitrack.models.entry import CycleEntry
from sensitrack.services.constants import (
    SHIFT_MARGIN,
    TEMPERATURE_PRECISION,
    SPOTTING,
    NO_BLEEDING,
)


def sort_entries(entries: Iterable[CycleEntry]) -> List[CycleEntry]:
    """
    Return a new list of entries sorted by ascending date.

    This is the only place where analysis indices are defined: index N of
    any analysis result refers to position N of this list.

    Example:
        >>> ordered = sort_entries(cycle.entries)
        >>> ordered[0].date <= ordered[-1].date
        True
    """
    return sorted(entries, key=lambda entry: entry.date)


def round_temperature(value: float) -> float:
    """Round a temperature to the comparison precision."""
    return round(value, TEMPERATURE_PRECISION)


def usable_temperature(entry: CycleEntry) -> Optional[float]:
    """
    Get an entry's temperature if it may be used for thermal analysis.

    Args:
        entry: Day to inspect

    Returns:
        Rounded temperature, or None when missing or excluded
    """
    if entry.exclude_temp or entry.temp is None:
        return None
    return round_temperature(entry.temp)


def shift_threshold(cover_line: float) -> float:
    """Temperature the confirming high must reach above the coverline."""
    return round_temperature(cover_line + SHIFT_MARGIN)


def partition_bleeding(entries: List[CycleEntry]) -> Tuple[List[int], List[int]]:
    """
    Split bleeding days into true bleeding and spotting.

    Args:
        entries: Entries sorted by date

    Returns:
        Tuple of (bleeding day indices, spotting day indices)
    """
    bleeding_days = []
    spotting_days = []
    for index, entry in enumerate(entries):
        level = (entry.bleeding or NO_BLEEDING).lower()
        if level == SPOTTING:
            spotting_days.append(index)
        elif level != NO_BLEEDING:
            bleeding_days.append(index)
    return bleeding_days, spotting_days
