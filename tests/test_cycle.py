"""
Tests for the cycle analysis entry point.
"""
import random
from datetime import date, timedelta

import pytest

from sensitrack.models.analysis import (
    AnalysisOptions,
    CycleAnalysis,
    PeakConfirmationPolicy,
    ShiftRule,
)
from sensitrack.models.entry import Cycle, CycleEntry
from sensitrack.services.cycle import analyze_cycle, coerce_options
from sensitrack.services.utils import sort_entries, partition_bleeding


def test_textbook_cycle(textbook_cycle):
    """Test a complete cycle through every component."""
    analysis = analyze_cycle(textbook_cycle)

    assert analysis.bleeding_days == [0, 1, 2, 3]
    assert analysis.spotting_days == [4]
    assert analysis.peak_day_index == 12
    assert analysis.cover_line == 36.35
    assert analysis.high_temp_indices == [12, 13, 14]
    assert analysis.temp_shift_confirmed_index == 14
    assert analysis.retreat_indices == []
    assert analysis.shift_rule == ShiftRule.STANDARD
    # Mucus complete on 16, temperature on 15: the later wins
    assert analysis.post_ovulatory_infertile_start_index == 16
    assert analysis.is_post_ovulatory_confirmed


@pytest.mark.parametrize("cycle", [
    None,
    42,
    "cycle",
    {"startDate": "2025-03-01", "entries": "not a list"},
    {"entries": [{"temp": 36.5}]},
])
def test_caller_misuse_returns_none(cycle):
    """Test invalid input returns None instead of raising."""
    assert analyze_cycle(cycle) is None


def test_empty_cycle_returns_none():
    """Test a cycle without entries has no analysis."""
    assert analyze_cycle(Cycle(start_date=date(2025, 3, 1))) is None
    assert analyze_cycle({"startDate": "2025-03-01", "entries": []}) is None
    assert analyze_cycle([]) is None


def test_mapping_input_with_camel_case_fields(make_entries):
    """Test a plain camelCase mapping is accepted."""
    temps = [36.3] * 6 + [36.5, 36.5, 36.6]
    raw = {
        "id": 7,
        "startDate": "2025-03-01",
        "entries": [
            {
                "date": (date(2025, 3, 1) + timedelta(days=i)).isoformat(),
                "temp": temp,
                "excludeTemp": False,
                "mucusSensation": "wet" if i == 5 else "dry",
                "mucusAspect": "nothing",
                "bleeding": "none"
            }
            for i, temp in enumerate(temps)
        ]
    }

    analysis = analyze_cycle(raw)

    assert analysis.peak_day_index == 5
    assert analysis.temp_shift_confirmed_index == 8
    assert analysis.post_ovulatory_infertile_start_index == 9


def test_entries_are_sorted_without_mutating_input(textbook_cycle):
    """Test indices follow date order while the caller's list is untouched."""
    shuffled = list(textbook_cycle.entries)
    random.Random(4).shuffle(shuffled)
    cycle = Cycle(id=3, start_date=textbook_cycle.start_date, entries=shuffled)
    before = list(cycle.entries)

    analysis = analyze_cycle(cycle)

    assert cycle.entries == before
    assert analysis == analyze_cycle(textbook_cycle)


def test_analysis_is_idempotent(textbook_cycle):
    """Test two calls on the same cycle give equal results."""
    first = analyze_cycle(textbook_cycle)
    second = analyze_cycle(textbook_cycle)

    assert first == second
    assert first is not second


def test_temperature_only_cycle(make_entries):
    """Test a shift without a peak needs the opt-in."""
    cycle = Cycle(start_date=date(2025, 3, 1), entries=make_entries([36.3] * 6 + [36.5, 36.5, 36.6]))

    analysis = analyze_cycle(cycle)
    assert analysis.temp_shift_confirmed_index == 8
    assert analysis.peak_day_index is None
    assert analysis.post_ovulatory_infertile_start_index is None

    analysis = analyze_cycle(cycle, {"allowTempOnly": True})
    assert analysis.post_ovulatory_infertile_start_index == 9

    analysis = analyze_cycle(cycle, AnalysisOptions(allow_temp_only=True))
    assert analysis.post_ovulatory_infertile_start_index == 9


def test_mucus_only_cycle(textbook_cycle):
    """Test a peak day without a shift never grants infertility."""
    entries = [entry.model_copy(update={"temp": None}) for entry in textbook_cycle.entries]
    cycle = Cycle(start_date=textbook_cycle.start_date, entries=entries)

    analysis = analyze_cycle(cycle, {"allow_temp_only": True})

    assert analysis.peak_day_index == 12
    assert analysis.cover_line is None
    assert analysis.temp_shift_confirmed_index is None
    assert analysis.high_temp_indices == []
    assert analysis.shift_rule is None
    assert analysis.post_ovulatory_infertile_start_index is None


def test_peak_confirmation_option(textbook_cycle):
    """Test the stricter peak policy is selectable through options."""
    entries = textbook_cycle.entries[:15]
    cycle = Cycle(start_date=textbook_cycle.start_date, entries=entries)

    assert analyze_cycle(cycle).peak_day_index == 12
    assert analyze_cycle(cycle, {"peakConfirmation": "all"}).peak_day_index is None


def test_invalid_options_fall_back_to_defaults():
    """Test unusable options never break the analysis."""
    assert coerce_options({"peakConfirmation": "sometimes"}) == AnalysisOptions()
    assert coerce_options("nonsense") == AnalysisOptions()
    assert coerce_options(None).peak_confirmation == PeakConfirmationPolicy.ANY


def test_bleeding_and_mucus_on_same_day_are_both_read():
    """Test the engine does not enforce bleeding/mucus exclusivity."""
    entries = [
        CycleEntry(date=date(2025, 3, 1), bleeding="light", mucus_sensation="wet"),
        CycleEntry(date=date(2025, 3, 2), mucus_sensation="dry", mucus_aspect="nothing"),
    ]

    analysis = analyze_cycle(entries)

    assert analysis.bleeding_days == [0]
    assert analysis.peak_day_index == 0


def test_partition_bleeding():
    """Test spotting is separated from bleeding and none is ignored."""
    start = date(2025, 3, 1)
    levels = ["heavy", "spotting", None, "none", "medium", "Spotting", "flow"]
    entries = [CycleEntry(date=start + timedelta(days=i), bleeding=level) for i, level in enumerate(levels)]

    assert partition_bleeding(entries) == ([0, 4, 6], [1, 5])


def test_sort_entries_returns_new_list():
    """Test the sort boundary copies."""
    entries = [CycleEntry(date=date(2025, 3, 2)), CycleEntry(date=date(2025, 3, 1))]
    ordered = sort_entries(entries)

    assert [e.date.day for e in ordered] == [1, 2]
    assert [e.date.day for e in entries] == [2, 1]


def test_serialized_analysis_uses_boundary_names(textbook_cycle):
    """Test the JSON shape consumed by renderers."""
    data = analyze_cycle(textbook_cycle).model_dump(mode="json", by_alias=True)

    assert data["peakDayIndex"] == 12
    assert data["coverLine"] == 36.35
    assert data["tempShiftConfirmedIndex"] == 14
    assert data["highTempIndices"] == [12, 13, 14]
    assert data["retreatIndices"] == []
    assert data["bleedingDays"] == [0, 1, 2, 3]
    assert data["spottingDays"] == [4]
    assert data["postOvulatoryInfertileStartIndex"] == 16
    assert data["shiftRule"] == "standard"
    assert CycleAnalysis.model_validate(data) == analyze_cycle(textbook_cycle)
