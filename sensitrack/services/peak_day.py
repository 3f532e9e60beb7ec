"""
Mucus peak day detection.

The peak day is the last day of the most fertile mucus quality seen in the
cycle. It is only reported once a following day shows a decline.
"""
from typing import List, Optional

from aws_lambda_powertools import Logger

from sensitrack.models.analysis import PeakConfirmationPolicy
from sensitrack.models.entry import CycleEntry
from sensitrack.services.constants import PEAK_MIN_WEIGHT, PEAK_LOOKAHEAD_DAYS
from sensitrack.services.mucus import entry_mucus_weight

logger = Logger()


def find_peak_day(
    entries: List[CycleEntry],
    policy: PeakConfirmationPolicy = PeakConfirmationPolicy.ANY
) -> Optional[int]:
    """
    Find and confirm the mucus peak day.

    Args:
        entries: Entries sorted by date
        policy: ANY confirms on one lower day among the next three,
            ALL needs all of the next three days to be lower

    Returns:
        Index of the confirmed peak day, or None
    """
    policy = PeakConfirmationPolicy(policy)
    weights = [entry_mucus_weight(entry) for entry in entries]

    candidate = None
    candidate_weight = 0
    for index, weight in enumerate(weights):
        if weight >= PEAK_MIN_WEIGHT and weight >= candidate_weight:
            candidate = index
            candidate_weight = weight

    if candidate is None:
        return None

    following = weights[candidate + 1:candidate + 1 + PEAK_LOOKAHEAD_DAYS]
    if policy == PeakConfirmationPolicy.ALL:
        confirmed = (
            len(following) == PEAK_LOOKAHEAD_DAYS
            and all(weight < candidate_weight for weight in following)
        )
    else:
        confirmed = any(weight < candidate_weight for weight in following)

    logger.debug("Peak day candidate evaluated", extra={
        "candidate_index": candidate,
        "candidate_weight": candidate_weight,
        "following_weights": following,
        "policy": policy.value,
        "confirmed": confirmed
    })

    return candidate if confirmed else None
