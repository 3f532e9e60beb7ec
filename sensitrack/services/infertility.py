"""
Post-ovulatory infertility resolution using the double-check rule.
"""
from typing import Optional

from sensitrack.models.analysis import AnalysisOptions, ThermalShift
from sensitrack.services.constants import DAYS_AFTER_PEAK


def resolve_infertile_start(
    peak_day_index: Optional[int],
    thermal_shift: Optional[ThermalShift],
    options: Optional[AnalysisOptions] = None
) -> Optional[int]:
    """
    Combine the mucus and thermal criteria into an infertile start index.

    The mucus criterion is complete on the evening of the third day after
    the peak, the thermal one on the evening of the confirming day. The
    later of the two wins. A thermal shift alone only counts when the
    caller allows it, and a peak day alone never does.

    Args:
        peak_day_index: Confirmed peak day index, or None
        thermal_shift: Confirmed thermal shift, or None
        options: Analysis options, defaults apply when None

    Returns:
        Index of the first post-ovulatory infertile day, or None

    Example:
        >>> resolve_infertile_start(10, shift_confirmed_at_20)
        21
    """
    options = options or AnalysisOptions()

    mucus_candidate = peak_day_index + DAYS_AFTER_PEAK if peak_day_index is not None else None
    temp_candidate = thermal_shift.shift_index + 1 if thermal_shift is not None else None

    if mucus_candidate is not None and temp_candidate is not None:
        return max(mucus_candidate, temp_candidate)
    if temp_candidate is not None and options.allow_temp_only:
        return temp_candidate
    return None
