"""Drink definitions and normalization of logged drinks.

A logged drink becomes grams of ethanol plus the number of minutes it takes
to absorb. Strength decides the category (beer / wine / spirits), the
category decides the baseline absorption time, and the food / rapid flags
adjust it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.errors import InvalidDrinkEvent, InvalidProfile
from bac_engine.models import DrinkEvent, PhysiologicalProfile

logger = logging.getLogger(__name__)


@dataclass
class DrinkType:
    """A preset serving used by the demo and the session helpers."""

    key: str
    name: str
    volume_ml: float
    alcohol_percentage: float


DRINK_TYPES = {
    "beer": DrinkType("beer", "Beer (0.5 l, 4.5%)", 500.0, 4.5),
    "wine": DrinkType("wine", "Wine (15 cl, 12%)", 150.0, 12.0),
    "spirits": DrinkType("spirits", "Shot (4 cl, 40%)", 40.0, 40.0),
}


@dataclass(frozen=True)
class NormalizedDrink:
    grams: float
    absorption_minutes: float


def list_drink_types() -> List[Tuple[str, str]]:
    """Return list of (key, name) for UI dropdowns."""
    return [(d.key, d.name) for d in DRINK_TYPES.values()]


def alcohol_grams(volume_ml: float, alcohol_percentage: float, config: ModelConfig = DEFAULT_CONFIG) -> float:
    """volume_ml x (percentage / 100) x ethanol density."""
    return volume_ml * (alcohol_percentage / 100.0) * config.ethanol_density


def infer_drink_category(alcohol_percentage: float, config: ModelConfig = DEFAULT_CONFIG) -> str:
    """<8% beer, 8-20% wine, >20% spirits (with the default thresholds)."""
    if alcohol_percentage < config.beer_max_percentage:
        return "beer"
    if alcohol_percentage <= config.wine_max_percentage:
        return "wine"
    return "spirits"


def validate_drink(event: DrinkEvent) -> None:
    if not math.isfinite(event.volume_ml) or event.volume_ml < 0:
        raise InvalidDrinkEvent(f"volume_ml must be a finite number >= 0, got {event.volume_ml}")
    if not math.isfinite(event.alcohol_percentage) or not 0 <= event.alcohol_percentage <= 100:
        raise InvalidDrinkEvent(
            f"alcohol_percentage must be between 0 and 100, got {event.alcohol_percentage}"
        )


def distribution_constant(profile: PhysiologicalProfile, config: ModelConfig = DEFAULT_CONFIG) -> float:
    """Validate the profile and return its Widmark r."""
    if not math.isfinite(profile.weight_kg) or profile.weight_kg <= 0:
        raise InvalidProfile(f"weight_kg must be a finite number > 0, got {profile.weight_kg}")
    r = config.distribution_constants.get(profile.gender)
    if r is None:
        raise InvalidProfile(f"no distribution constant for gender {profile.gender!r}")
    return r


def absorption_minutes(event: DrinkEvent, config: ModelConfig = DEFAULT_CONFIG) -> float:
    if event.rapid_consumption:
        return config.rapid_absorption_minutes
    minutes = config.absorption_minutes[infer_drink_category(event.alcohol_percentage, config)]
    if event.food_consumed:
        minutes *= config.food_absorption_factor
    if minutes <= 0:
        raise ValueError(f"absorption duration must be > 0, got {minutes}")
    return minutes


def normalize_drink(event: DrinkEvent, config: ModelConfig = DEFAULT_CONFIG) -> NormalizedDrink:
    """Validate one drink and reduce it to grams + absorption minutes."""
    try:
        validate_drink(event)
    except InvalidDrinkEvent:
        logger.debug("rejected drink event %r", event)
        raise
    return NormalizedDrink(
        grams=alcohol_grams(event.volume_ml, event.alcohol_percentage, config),
        absorption_minutes=absorption_minutes(event, config),
    )


def total_alcohol_grams(events: Iterable[DrinkEvent], config: ModelConfig = DEFAULT_CONFIG) -> float:
    return sum(normalize_drink(e, config).grams for e in events)


def grams_to_beer_units(grams: float, config: ModelConfig = DEFAULT_CONFIG) -> float:
    """Express grams of ethanol as a number of 33 cl 5% beers."""
    unit = alcohol_grams(config.beer_unit_ml, config.beer_unit_percentage, config)
    return grams / unit
