"""
Pytest configuration and shared fixtures.
"""
import pytest
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sensitrack.models.entry import Cycle, CycleEntry

CYCLE_START = date(2025, 3, 1)

# Temperatures of a textbook cycle: shift confirmed on index 14, coverline 36.35
TEXTBOOK_TEMPS = [
    36.45, 36.40, 36.35, 36.30, 36.25, 36.30, 36.20, 36.30, 36.25, 36.35,
    36.30, 36.20, 36.50, 36.55, 36.60, 36.65, 36.60, 36.70, 36.65, 36.70,
]


@pytest.fixture
def make_entries():
    """Build consecutive daily entries from a list of temperatures."""
    def _make(temps: List[Optional[float]], start: date = CYCLE_START, **fields) -> List[CycleEntry]:
        return [
            CycleEntry(date=start + timedelta(days=i), temp=temp, **fields)
            for i, temp in enumerate(temps)
        ]
    return _make


@pytest.fixture
def textbook_cycle() -> Cycle:
    """
    Create a complete cycle.

    Bleeding on days 1-4, spotting on day 5, fertile mucus from index 8,
    last G+ day at index 12 followed by dry days, three highs at 12-14.
    """
    mucus = {
        5: ("dry", "nothing"),
        6: ("dry", "nothing"),
        7: ("damp", None),
        8: ("damp", "creamy"),
        9: (None, "sticky"),
        10: ("wet", "egg_white"),
        11: ("slippery", "stretchy"),
        12: ("slippery", None),
    }
    bleeding = {0: "heavy", 1: "heavy", 2: "medium", 3: "light", 4: "spotting"}

    entries = []
    for i, temp in enumerate(TEXTBOOK_TEMPS):
        sensation, aspect = mucus.get(i, ("dry", "nothing") if i > 12 else (None, None))
        entries.append(CycleEntry(
            date=CYCLE_START + timedelta(days=i),
            temp=temp,
            mucus_sensation=sensation,
            mucus_aspect=aspect,
            bleeding=bleeding.get(i, "none")
        ))
    return Cycle(id=3, start_date=CYCLE_START, entries=entries)


@dataclass
class FakeLambdaContext:
    """Minimal Lambda context for handler tests."""
    function_name: str = "sensitrack-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:eu-west-1:123456789012:function:sensitrack-test"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Create a fake Lambda context."""
    return FakeLambdaContext()
