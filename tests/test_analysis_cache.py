"""
Tests for analysis memoization.
"""
import pytest

from sensitrack.models.analysis import AnalysisOptions
from sensitrack.models.entry import Cycle
from sensitrack.services.analysis_cache import AnalysisCache, content_key
from sensitrack.services.cycle import analyze_cycle


def test_same_content_is_a_hit(textbook_cycle):
    """Test repeated requests reuse the stored analysis."""
    cache = AnalysisCache()

    first = cache.get_or_compute(textbook_cycle)
    second = cache.get_or_compute(textbook_cycle)

    assert first == second == analyze_cycle(textbook_cycle)
    assert cache.misses == 1
    assert cache.hits == 1


def test_entry_order_does_not_change_key(textbook_cycle):
    """Test the key is computed on sorted entries."""
    reversed_entries = list(reversed(textbook_cycle.entries))
    options = AnalysisOptions()

    assert content_key(textbook_cycle.entries, options) == content_key(reversed_entries, options)


def test_changed_entry_is_a_miss(textbook_cycle):
    """Test any change to the entry set invalidates the cached result."""
    cache = AnalysisCache()
    cache.get_or_compute(textbook_cycle)

    entries = list(textbook_cycle.entries)
    entries[14] = entries[14].model_copy(update={"exclude_temp": True})
    changed = Cycle(id=textbook_cycle.id, start_date=textbook_cycle.start_date, entries=entries)

    result = cache.get_or_compute(changed)

    assert cache.misses == 2
    assert result == analyze_cycle(changed)
    assert result.temp_shift_confirmed_index != 14


def test_options_are_part_of_key(make_entries):
    """Test a different option set is analysed separately."""
    cycle = Cycle(entries=make_entries([36.3] * 6 + [36.5, 36.5, 36.6]))
    cache = AnalysisCache()

    assert cache.get_or_compute(cycle).post_ovulatory_infertile_start_index is None
    assert cache.get_or_compute(cycle, {"allowTempOnly": True}).post_ovulatory_infertile_start_index == 9
    assert cache.misses == 2


def test_returned_analysis_is_a_copy(textbook_cycle):
    """Test callers cannot corrupt the cached instance."""
    cache = AnalysisCache()
    result = cache.get_or_compute(textbook_cycle)
    result.high_temp_indices.append(99)
    result.peak_day_index = None

    again = cache.get_or_compute(textbook_cycle)
    assert again.high_temp_indices == [12, 13, 14]
    assert again.peak_day_index == 12


def test_least_recently_used_is_evicted(make_entries):
    cache = AnalysisCache(max_entries=2)
    cycles = [Cycle(entries=make_entries([36.0 + i / 10])) for i in range(3)]

    for cycle in cycles:
        cache.get_or_compute(cycle)
    assert len(cache) == 2

    cache.get_or_compute(cycles[0])
    assert cache.misses == 4


def test_invalidate_clears_cache(textbook_cycle):
    cache = AnalysisCache()
    cache.get_or_compute(textbook_cycle)
    cache.invalidate()

    assert len(cache) == 0
    cache.get_or_compute(textbook_cycle)
    assert cache.misses == 2


def test_empty_cycle_is_not_cached():
    cache = AnalysisCache()
    assert cache.get_or_compute(None) is None
    assert cache.get_or_compute(Cycle()) is None
    assert len(cache) == 0


def test_max_entries_must_be_positive():
    with pytest.raises(ValueError):
        AnalysisCache(max_entries=0)
