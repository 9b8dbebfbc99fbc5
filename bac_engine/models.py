"""Input and output records passed to and from the engine."""

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional


@dataclass(frozen=True)
class PhysiologicalProfile:
    weight_kg: float
    gender: str  # key into ModelConfig.distribution_constants


@dataclass(frozen=True)
class DrinkEvent:
    """One logged drink.

    ``food_consumed`` slows absorption; ``rapid_consumption`` (chugged,
    shotgunned) collapses it to a short fixed window and wins over food.
    Both default to None, meaning "not reported", which the engine treats
    the same as False.
    """

    volume_ml: float
    alcohol_percentage: float
    consumed_at: datetime
    food_consumed: Optional[bool] = None
    rapid_consumption: Optional[bool] = None


class ConcentrationSample(NamedTuple):
    time: datetime
    bac: float  # promille
