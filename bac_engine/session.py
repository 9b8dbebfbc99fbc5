"""
Drinking session for one person: profile plus drink log, with BAC helpers.
The log is only a list; every BAC query recomputes from it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from bac_engine import calculations, metrics
from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.drinks import DRINK_TYPES, grams_to_beer_units, total_alcohol_grams
from bac_engine.models import ConcentrationSample, DrinkEvent, PhysiologicalProfile


@dataclass
class Session:
    profile: PhysiologicalProfile
    config: ModelConfig = DEFAULT_CONFIG
    _events: List[DrinkEvent] = field(default_factory=list)

    def add_event(self, event: DrinkEvent) -> None:
        self._events.append(event)

    def add_drink(
        self,
        consumed_at: datetime,
        volume_ml: float,
        alcohol_percentage: float,
        food_consumed: Optional[bool] = None,
        rapid_consumption: Optional[bool] = None,
    ) -> DrinkEvent:
        event = DrinkEvent(volume_ml, alcohol_percentage, consumed_at, food_consumed, rapid_consumption)
        self.add_event(event)
        return event

    def add_preset(self, consumed_at: datetime, drink_key: str, **modifiers) -> DrinkEvent:
        dt = DRINK_TYPES.get(drink_key)
        if dt is None:
            raise KeyError(f"unknown drink type {drink_key!r}")
        return self.add_drink(consumed_at, dt.volume_ml, dt.alcohol_percentage, **modifiers)

    def remove_event(self, event: DrinkEvent) -> None:
        self._events.remove(event)

    @property
    def events(self) -> List[DrinkEvent]:
        return sorted(self._events, key=lambda e: e.consumed_at)

    @property
    def drink_count(self) -> int:
        return len(self._events)

    @property
    def total_grams(self) -> float:
        return total_alcohol_grams(self._events, self.config)

    @property
    def beer_units(self) -> float:
        return grams_to_beer_units(self.total_grams, self.config)

    def bac_at(self, at: datetime) -> float:
        return calculations.bac_at_time(self._events, self.profile, at, self.config)

    def curve(
        self,
        start: datetime,
        end: datetime,
        interval_minutes: Optional[float] = None,
    ) -> List[ConcentrationSample]:
        return calculations.bac_curve(self._events, self.profile, start, end, interval_minutes, self.config)

    def peak(self, start: datetime, end: datetime) -> float:
        return metrics.peak_in_window(self._events, self.profile, start, end, config=self.config)

    def time_to_peak(self, now: datetime) -> float:
        return metrics.time_to_peak_minutes(self._events, now, self.config)

    def hours_until_sober(self, at: datetime) -> float:
        return metrics.time_to_sober_hours(self.bac_at(at), self.config)
