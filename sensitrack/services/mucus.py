"""
Cervical mucus classification according to the Sensiplan rules.

Typical usage:
    code = classify_mucus(entry.mucus_sensation, entry.mucus_aspect)
    weight = get_mucus_weight(code)
"""
from enum import Enum
from typing import Optional, Union

from sensitrack.models.analysis import MucusCode
from sensitrack.models.entry import CycleEntry
from sensitrack.services.constants import (
    FERTILE_SENSATIONS,
    FERTILE_ASPECTS,
    LESSER_ASPECTS,
    DAMP_SENSATIONS,
    DRY_SENSATIONS,
    NOTHING_VALUES,
    MUCUS_WEIGHTS,
)


def _normalize(value: Optional[Union[str, Enum]]) -> str:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str) or not value.strip():
        return "none"
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def classify_mucus(sensation: Optional[str], aspect: Optional[str]) -> MucusCode:
    """
    Map a (sensation, aspect) observation to a fertility code.

    Rules are evaluated in order and the first match wins. Any combination
    not covered by a rule resolves to h, never to a less fertile code.

    Args:
        sensation: Observed sensation, None when not observed
        aspect: Observed aspect, None when not observed

    Returns:
        One of G+, G, h, t or --

    Example:
        >>> classify_mucus("dry", "creamy")
        <MucusCode.G: 'G'>
        >>> classify_mucus(None, None)
        <MucusCode.NONE: '--'>
    """
    sensation = _normalize(sensation)
    aspect = _normalize(aspect)

    if sensation in FERTILE_SENSATIONS or aspect in FERTILE_ASPECTS:
        return MucusCode.G_PLUS
    if aspect in LESSER_ASPECTS:
        return MucusCode.G
    if sensation in DAMP_SENSATIONS:
        return MucusCode.H
    if sensation in DRY_SENSATIONS and aspect in NOTHING_VALUES:
        return MucusCode.T
    if sensation in NOTHING_VALUES and aspect in NOTHING_VALUES:
        return MucusCode.NONE
    return MucusCode.H


def get_mucus_weight(code: Union[MucusCode, str, None]) -> int:
    """Ordinal fertility weight of a code; unknown codes weigh 0."""
    try:
        return MUCUS_WEIGHTS[MucusCode(code)]
    except ValueError:
        return 0


def entry_mucus_weight(entry: CycleEntry) -> int:
    """Classify an entry's mucus and return its weight."""
    return get_mucus_weight(classify_mucus(entry.mucus_sensation, entry.mucus_aspect))
