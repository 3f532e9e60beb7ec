"""
Analysis result models for the symptothermal evaluation of a cycle.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MucusCode(str, Enum):
    """
    Fertility codes for a mucus observation, most fertile first.
    """
    G_PLUS = "G+"
    G = "G"
    H = "h"
    T = "t"
    NONE = "--"


class PeakConfirmationPolicy(str, Enum):
    """
    How the days after a peak candidate must decline to confirm it.
    """
    ANY = "any"  # at least one of the next three days is lower
    ALL = "all"  # all of the next three days are lower


class ShiftRule(str, Enum):
    """
    Rule that confirmed the thermal shift.
    """
    STANDARD = "standard"
    EXCEPTION_1 = "exception_1"
    RETREAT = "retreat"


class AnalysisOptions(BaseModel):
    """
    Caller options for a cycle analysis.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    allow_temp_only: bool = False
    peak_confirmation: PeakConfirmationPolicy = PeakConfirmationPolicy.ANY


class ThermalShift(BaseModel):
    """
    A confirmed 6-low/3-high temperature pattern.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    cover_line: float
    high_indices: List[int]
    shift_index: int
    retreat_indices: List[int] = Field(default_factory=list)
    rule: ShiftRule = ShiftRule.STANDARD


class CycleAnalysis(BaseModel):
    """
    Derived view of one cycle.

    Every index points into the date-ascending sorted entry sequence, not
    at a calendar day.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    peak_day_index: Optional[int] = None
    cover_line: Optional[float] = None
    temp_shift_confirmed_index: Optional[int] = None
    high_temp_indices: List[int] = Field(default_factory=list)
    retreat_indices: List[int] = Field(default_factory=list)
    bleeding_days: List[int] = Field(default_factory=list)
    spotting_days: List[int] = Field(default_factory=list)
    post_ovulatory_infertile_start_index: Optional[int] = None
    shift_rule: Optional[ShiftRule] = None

    @property
    def is_post_ovulatory_confirmed(self) -> bool:
        """Check if a post-ovulatory infertile start was granted."""
        return self.post_ovulatory_infertile_start_index is not None


class ChartMarkers(BaseModel):
    """
    Analysis positions expressed as cycle days (day 1 is the cycle start).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cover_line: Optional[float] = None
    peak_day: Optional[int] = None
    shift_confirmed_day: Optional[int] = None
    infertile_from_day: Optional[int] = None
    high_temp_days: List[int] = Field(default_factory=list)
    retreat_days: List[int] = Field(default_factory=list)
    bleeding_days: List[int] = Field(default_factory=list)
    spotting_days: List[int] = Field(default_factory=list)
