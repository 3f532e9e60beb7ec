"""
Entry and cycle model definitions for daily fertility observations.
"""
import math
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MucusSensation(str, Enum):
    """
    Sensation felt at the vulva during the day.
    """
    WET = "wet"
    SLIPPERY = "slippery"
    DAMP = "damp"
    DRY = "dry"
    NOTHING = "nothing"


class MucusAspect(str, Enum):
    """
    Visible aspect of cervical mucus.
    """
    EGG_WHITE = "egg_white"
    STRETCHY = "stretchy"
    CREAMY = "creamy"
    YELLOWISH = "yellowish"
    STICKY = "sticky"
    NOTHING = "nothing"


class BleedingLevel(str, Enum):
    """
    Flow level recorded for a day.
    """
    NONE = "none"
    SPOTTING = "spotting"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class Disturbance(str, Enum):
    """
    Circumstances that may distort the morning temperature.
    """
    SLEEP = "sleep"
    ALCOHOL = "alcohol"
    ILLNESS = "illness"
    STRESS = "stress"
    LATE = "late"


class CycleEntry(BaseModel):
    """
    One calendar day of observations.

    Mucus and bleeding fields are kept as plain strings so values outside
    the known vocabulary still reach the classifier instead of failing
    validation.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    date: date
    temp: Optional[float] = None
    exclude_temp: bool = False
    mucus_sensation: Optional[str] = None
    mucus_aspect: Optional[str] = None
    bleeding: Optional[str] = None
    disturbances: List[str] = Field(default_factory=list)

    @field_validator("temp", mode="before")
    @classmethod
    def coerce_temperature(cls, value):
        """Turn anything that is not a finite number into a missing reading."""
        if value is None or isinstance(value, bool):
            return None
        try:
            temp = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(temp):
            return None
        return temp

    @field_validator("mucus_sensation", "mucus_aspect", "bleeding", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, Enum):
            value = value.value
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if not isinstance(value, str):
            return None
        return value.strip()

    @field_validator("exclude_temp", mode="before")
    @classmethod
    def none_is_false(cls, value):
        return False if value is None else value


class Cycle(BaseModel):
    """
    Represents one menstrual cycle: its first day and its daily entries.

    The analysis engine never reads start_date; it is only needed to turn
    analysis indices into cycle days.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = 1
    start_date: Optional[date] = None
    entries: List[CycleEntry] = Field(default_factory=list)
