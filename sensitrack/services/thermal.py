"""
Thermal shift detection (3 over 6 rule).

A shift needs three temperatures above the highest of the six preceding
lows, the third of them at least 0.2°C above it. Two tolerances exist:

- exception 1: when the third high misses the 0.2°C margin, a fourth
  higher day reaching it confirms the shift instead;
- exception 2: one temperature falling back to or below the coverline is
  tolerated inside the high window.

Both tolerances cannot be used in the same window.

Typical usage:
    shift = find_thermal_shift(sort_entries(cycle.entries))
    if shift:
        print(shift.cover_line, shift.shift_index)
"""
from typing import List, Optional

from aws_lambda_powertools import Logger

from sensitrack.models.analysis import ShiftRule, ThermalShift
from sensitrack.models.entry import CycleEntry
from sensitrack.services.constants import (
    LOW_WINDOW_DAYS,
    MIN_LOW_TEMPERATURES,
    HIGH_TEMPERATURES_REQUIRED,
)
from sensitrack.services.utils import usable_temperature, shift_threshold

logger = Logger()


def _evaluate_window(
    temps: List[Optional[float]],
    start: int,
    max_low: float
) -> Optional[ThermalShift]:
    """
    Try to confirm a shift whose first high is the first usable day from start.

    Args:
        temps: Usable temperature per day, None where unusable
        start: Index the high window opens at
        max_low: Coverline candidate for this window

    Returns:
        The confirmed shift, or None when this window fails
    """
    threshold = shift_threshold(max_low)
    highs = []
    retreats = []

    position = start
    while position < len(temps) and len(highs) < HIGH_TEMPERATURES_REQUIRED:
        temp = temps[position]
        if temp is not None:
            if temp > max_low:
                highs.append(position)
            elif not highs or retreats:
                # Window opening on a low, or a second retreat
                return None
            else:
                retreats.append(position)
        position += 1

    if len(highs) < HIGH_TEMPERATURES_REQUIRED:
        return None

    third_high = highs[-1]
    if temps[third_high] >= threshold:
        return ThermalShift(
            cover_line=max_low,
            high_indices=highs,
            shift_index=third_high,
            retreat_indices=retreats,
            rule=ShiftRule.RETREAT if retreats else ShiftRule.STANDARD
        )

    if retreats:
        return None

    for position in range(third_high + 1, len(temps)):
        temp = temps[position]
        if temp is None:
            continue
        if temp > max_low and temp >= threshold:
            return ThermalShift(
                cover_line=max_low,
                high_indices=highs,
                shift_index=position,
                rule=ShiftRule.EXCEPTION_1
            )
        # The fourth usable day decides
        return None

    return None


def find_thermal_shift(entries: List[CycleEntry]) -> Optional[ThermalShift]:
    """
    Find the earliest confirmed thermal shift of a cycle.

    Args:
        entries: Entries sorted by date

    Returns:
        ThermalShift for the first window that confirms, or None

    Example:
        >>> shift = find_thermal_shift(entries)
        >>> shift.high_indices
        [6, 7, 8]
    """
    temps = [usable_temperature(entry) for entry in entries]

    for start in range(LOW_WINDOW_DAYS, len(temps)):
        lows = [temp for temp in temps[start - LOW_WINDOW_DAYS:start] if temp is not None]
        if len(lows) < MIN_LOW_TEMPERATURES:
            continue

        max_low = max(lows)
        shift = _evaluate_window(temps, start, max_low)
        if shift is None:
            continue

        logger.debug("Thermal shift confirmed", extra={
            "window_start": start,
            "cover_line": shift.cover_line,
            "high_indices": shift.high_indices,
            "shift_index": shift.shift_index,
            "retreat_indices": shift.retreat_indices,
            "rule": shift.rule.value
        })
        return shift

    return None
