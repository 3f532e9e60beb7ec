"""
Service module for symptothermal cycle analysis.

This module is the single entry point of the analysis engine. It validates
and orders the cycle's entries, runs the mucus and temperature detectors
independently, combines them with the double-check rule and assembles the
result record.

Typical usage:
    cycle = repository.get_cycle(user_id, cycle_id)
    analysis = analyze_cycle(cycle, {"allowTempOnly": False})
    if analysis and analysis.post_ovulatory_infertile_start_index is not None:
        ...
"""
from typing import Any, Mapping, Optional, Union

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from sensitrack.models.analysis import AnalysisOptions, CycleAnalysis
from sensitrack.models.entry import Cycle
from sensitrack.services.infertility import resolve_infertile_start
from sensitrack.services.peak_day import find_peak_day
from sensitrack.services.thermal import find_thermal_shift
from sensitrack.services.utils import sort_entries, partition_bleeding

logger = Logger()


def coerce_cycle(cycle: Any) -> Optional[Cycle]:
    """
    Turn caller input into a Cycle, or None when it cannot be one.

    Accepts a Cycle, a mapping shaped like one, or a bare list of entries.
    """
    if cycle is None:
        return None
    if isinstance(cycle, Cycle):
        return cycle

    try:
        if isinstance(cycle, Mapping):
            return Cycle.model_validate(cycle)
        if isinstance(cycle, (list, tuple)):
            return Cycle(entries=list(cycle))
    except ValidationError as e:
        logger.warning("Rejected malformed cycle input", extra={
            "error_count": e.error_count(),
            "errors": str(e)
        })
        return None

    logger.warning("Unsupported cycle input", extra={
        "input_type": type(cycle).__name__
    })
    return None


def coerce_options(options: Union[AnalysisOptions, Mapping, None]) -> AnalysisOptions:
    """Turn caller options into AnalysisOptions, falling back to defaults."""
    if options is None:
        return AnalysisOptions()
    if isinstance(options, AnalysisOptions):
        return options
    try:
        return AnalysisOptions.model_validate(dict(options))
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring invalid analysis options", extra={
            "error": str(e)
        })
        return AnalysisOptions()


def analyze_cycle(
    cycle: Any,
    options: Union[AnalysisOptions, Mapping, None] = None
) -> Optional[CycleAnalysis]:
    """
    Analyze one cycle with the Sensiplan rules.

    Args:
        cycle: Cycle, mapping shaped like a Cycle, or list of entries
        options: AnalysisOptions or mapping with allowTempOnly / peakConfirmation

    Returns:
        CycleAnalysis, or None when there is nothing to analyze

    Example:
        >>> analysis = analyze_cycle(cycle)
        >>> analysis.peak_day_index, analysis.temp_shift_confirmed_index
        (14, 17)
    """
    cycle = coerce_cycle(cycle)
    if cycle is None or not cycle.entries:
        return None

    options = coerce_options(options)
    entries = sort_entries(cycle.entries)

    bleeding_days, spotting_days = partition_bleeding(entries)
    peak_day_index = find_peak_day(entries, options.peak_confirmation)
    shift = find_thermal_shift(entries)
    infertile_start = resolve_infertile_start(peak_day_index, shift, options)

    analysis = CycleAnalysis(
        peak_day_index=peak_day_index,
        bleeding_days=bleeding_days,
        spotting_days=spotting_days,
        post_ovulatory_infertile_start_index=infertile_start
    )
    if shift is not None:
        analysis.cover_line = shift.cover_line
        analysis.temp_shift_confirmed_index = shift.shift_index
        analysis.high_temp_indices = list(shift.high_indices)
        analysis.retreat_indices = list(shift.retreat_indices)
        analysis.shift_rule = shift.rule

    logger.info("Cycle analyzed", extra={
        "cycle_id": cycle.id,
        "entry_count": len(entries),
        "peak_day_index": peak_day_index,
        "temp_shift_confirmed_index": analysis.temp_shift_confirmed_index,
        "post_ovulatory_infertile_start_index": infertile_start
    })

    return analysis
