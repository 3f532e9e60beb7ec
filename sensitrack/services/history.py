"""
Service module for the per-day history list of a cycle.

Typical usage:
    for line in format_history(cycle):
        print(line)
"""
from typing import List

from sensitrack.models.analysis import MucusCode
from sensitrack.models.entry import Cycle, CycleEntry
from sensitrack.services.constants import BLEEDING_LABELS, NO_BLEEDING
from sensitrack.services.mucus import classify_mucus


def format_entry_summary(entry: CycleEntry) -> str:
    """
    Summarize one day on a single line.

    Args:
        entry: Day to summarize

    Returns:
        Details joined with " • ", empty when nothing was recorded

    Example:
        >>> format_entry_summary(entry)
        '🌡️ 36.55°C • Mucus: G+'
    """
    details = []
    if entry.temp is not None:
        text = f"🌡️ {entry.temp}°C"
        if entry.exclude_temp:
            text += " (excluded)"
        details.append(text)

    code = classify_mucus(entry.mucus_sensation, entry.mucus_aspect)
    if code != MucusCode.NONE:
        details.append(f"Mucus: {code.value}")

    if entry.bleeding and entry.bleeding != NO_BLEEDING:
        details.append(BLEEDING_LABELS.get(entry.bleeding, entry.bleeding))

    return " • ".join(details)


def format_history(cycle: Cycle) -> List[str]:
    """
    Format every entry of a cycle, newest first.

    Returns:
        Lines of the form "<ISO date>: <summary>"
    """
    entries = sorted(cycle.entries, key=lambda entry: entry.date, reverse=True)
    return [f"{entry.date.isoformat()}: {format_entry_summary(entry)}" for entry in entries]
