"""
Analysis memoization service.

Analyses are cheap but charts ask for them on every redraw. This module
provides an explicit cache keyed by the content of the sorted entries and
the options, so any change to the entry set yields a new key.

Typical usage:
    cache = AnalysisCache()
    analysis = cache.get_or_compute(cycle, options)
"""
import hashlib
import json
import threading
from collections import OrderedDict
from typing import Any, Iterable, Mapping, Optional, Union

from aws_lambda_powertools import Logger

from sensitrack.models.analysis import AnalysisOptions, CycleAnalysis
from sensitrack.models.entry import CycleEntry
from sensitrack.services.cycle import analyze_cycle, coerce_cycle, coerce_options
from sensitrack.services.utils import sort_entries

logger = Logger()


def content_key(entries: Iterable[CycleEntry], options: AnalysisOptions) -> str:
    """
    Hash the sorted entries and options into a cache key.

    Args:
        entries: Cycle entries in any order
        options: Options the analysis runs with

    Returns:
        Hex SHA-256 digest
    """
    payload = {
        "entries": [entry.model_dump(mode="json") for entry in sort_entries(entries)],
        "options": options.model_dump(mode="json"),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


class AnalysisCache:
    """Bounded LRU cache of cycle analyses."""

    def __init__(self, max_entries: int = 32):
        """
        Initialize the cache.

        Args:
            max_entries: Number of analyses kept before the least recently
                used one is evicted
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._items: "OrderedDict[str, Optional[CycleAnalysis]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def get_or_compute(
        self,
        cycle: Any,
        options: Union[AnalysisOptions, Mapping, None] = None
    ) -> Optional[CycleAnalysis]:
        """
        Return the cached analysis for this content, computing it on a miss.

        Args:
            cycle: Anything analyze_cycle accepts
            options: Analysis options

        Returns:
            A copy of the cached CycleAnalysis, or None for an empty cycle
        """
        cycle = coerce_cycle(cycle)
        if cycle is None or not cycle.entries:
            return None

        options = coerce_options(options)
        key = content_key(cycle.entries, options)

        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                self.hits += 1
                logger.info("Analysis cache hit", extra={
                    "cycle_id": cycle.id,
                    "cache_hit": True
                })
                return self._copy(self._items[key])

        analysis = analyze_cycle(cycle, options)

        with self._lock:
            self.misses += 1
            self._items[key] = analysis
            self._items.move_to_end(key)
            while len(self._items) > self.max_entries:
                self._items.popitem(last=False)
            logger.info("Analysis cache miss", extra={
                "cycle_id": cycle.id,
                "cache_hit": False,
                "cache_size": len(self._items)
            })

        return self._copy(analysis)

    def invalidate(self) -> None:
        """Drop every cached analysis."""
        with self._lock:
            self._items.clear()

    @staticmethod
    def _copy(analysis: Optional[CycleAnalysis]) -> Optional[CycleAnalysis]:
        # Callers own their result; never hand out the cached instance
        return analysis.model_copy(deep=True) if analysis is not None else None
