"""
Conversion of analysis indices into cycle days for charts.

Analysis results only know positions in the sorted entry list. Charts are
drawn per cycle day, counted from the cycle start date, and days without an
entry leave gaps, so the two do not line up. All date arithmetic for
rendering lives here.
"""
from datetime import date, timedelta
from typing import List, Optional

from sensitrack.models.analysis import ChartMarkers, CycleAnalysis
from sensitrack.models.entry import Cycle, CycleEntry
from sensitrack.services.utils import sort_entries


def index_to_date(entries: List[CycleEntry], index: int) -> date:
    """
    Get the calendar date of an analysis index.

    Indices past the last entry are projected one day per index from the
    last entry's date; the infertile start may fall on a day not yet logged.

    Args:
        entries: Entries sorted by date, not empty
        index: Analysis index

    Returns:
        Calendar date for the index
    """
    if index < len(entries):
        return entries[index].date
    return entries[-1].date + timedelta(days=index - len(entries) + 1)


def cycle_day(day: date, start_date: date) -> int:
    """Cycle day number of a date, day 1 being the start date."""
    return (day - start_date).days + 1


def build_chart_markers(cycle: Cycle, analysis: CycleAnalysis) -> ChartMarkers:
    """
    Express an analysis in cycle days.

    Args:
        cycle: The analyzed cycle
        analysis: Result of analyze_cycle for that cycle

    Returns:
        ChartMarkers with cycle-day numbers

    Example:
        >>> markers = build_chart_markers(cycle, analyze_cycle(cycle))
        >>> markers.infertile_from_day
        19
    """
    entries = sort_entries(cycle.entries)
    if not entries:
        return ChartMarkers()
    start_date = cycle.start_date or entries[0].date

    def to_day(index: Optional[int]) -> Optional[int]:
        if index is None:
            return None
        return cycle_day(index_to_date(entries, index), start_date)

    def to_days(indices: List[int]) -> List[int]:
        return [to_day(index) for index in indices]

    return ChartMarkers(
        cover_line=analysis.cover_line,
        peak_day=to_day(analysis.peak_day_index),
        shift_confirmed_day=to_day(analysis.temp_shift_confirmed_index),
        infertile_from_day=to_day(analysis.post_ovulatory_infertile_start_index),
        high_temp_days=to_days(analysis.high_temp_indices),
        retreat_days=to_days(analysis.retreat_indices),
        bleeding_days=to_days(analysis.bleeding_days),
        spotting_days=to_days(analysis.spotting_days)
    )
