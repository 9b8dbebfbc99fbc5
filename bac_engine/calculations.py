"""BAC calculations: per-drink two-phase curves summed over all drinks.

Model (promille):
- Peak of one drink: grams / (body_weight_g * r) * 1000, r = Widmark constant
- Absorption: logistic S-curve towards the peak over the drink's absorption
  window, minus a small share of the elimination rate
- Elimination: linear drop from the peak at elimination_per_hour
- Total: sum of every drink consumed at or before the query time
"""

import logging
import math
from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Iterable, Iterator, List, Optional

from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.drinks import NormalizedDrink, distribution_constant, normalize_drink
from bac_engine.models import ConcentrationSample, DrinkEvent, PhysiologicalProfile

logger = logging.getLogger(__name__)


def peak_from_grams(grams: float, weight_kg: float, r: float) -> float:
    """Promille one drink reaches once fully absorbed, before elimination."""
    return grams / (weight_kg * 1000.0 * r) * 1000.0


def absorbed_fraction(elapsed_minutes: float, duration_minutes: float, config: ModelConfig = DEFAULT_CONFIG) -> float:
    midpoint = duration_minutes / 2.0
    k = config.absorption_steepness / duration_minutes
    fraction = 1.0 / (1.0 + math.exp(-k * (elapsed_minutes - midpoint)))
    return max(0.0, min(1.0, fraction))


def drink_contribution(
    drink: NormalizedDrink,
    elapsed_minutes: float,
    weight_kg: float,
    r: float,
    config: ModelConfig = DEFAULT_CONFIG,
) -> float:
    """Unrounded promille contributed by one drink ``elapsed_minutes`` after it was consumed."""
    if elapsed_minutes < 0:
        return 0.0

    peak = peak_from_grams(drink.grams, weight_kg, r)
    duration = drink.absorption_minutes

    if elapsed_minutes <= duration:
        eliminated = config.absorption_elimination_factor * config.elimination_per_hour * (elapsed_minutes / 60.0)
        return max(0.0, peak * absorbed_fraction(elapsed_minutes, duration, config) - eliminated)

    hours_past_absorption = (elapsed_minutes - duration) / 60.0
    return max(0.0, peak - config.elimination_per_hour * hours_past_absorption)


class PreparedDrinks:
    """One person's drinks, validated, normalized and sorted once.

    Reuse an instance for many query times (curves, peak searches) instead of
    re-normalizing the log per sample.
    """

    def __init__(
        self,
        events: Iterable[DrinkEvent],
        profile: PhysiologicalProfile,
        config: ModelConfig = DEFAULT_CONFIG,
    ):
        self.config = config
        self.weight_kg = profile.weight_kg
        self.r = distribution_constant(profile, config)

        pairs = sorted(
            ((e.consumed_at, normalize_drink(e, config)) for e in events),
            key=lambda pair: pair[0],
        )
        self.times: List[datetime] = [t for t, _ in pairs]
        self.drinks: List[NormalizedDrink] = [d for _, d in pairs]
        logger.debug("prepared %d drinks (weight=%.1f kg, r=%.2f)", len(self.drinks), self.weight_kg, self.r)

    def __len__(self) -> int:
        return len(self.drinks)

    def bac_at(self, at: datetime) -> float:
        """Total promille at ``at``, rounded to config.precision."""
        total = 0.0
        for i in range(bisect_right(self.times, at)):
            elapsed = (at - self.times[i]).total_seconds() / 60.0
            total += drink_contribution(self.drinks[i], elapsed, self.weight_kg, self.r, self.config)
        return round(max(0.0, total), self.config.precision)

    def absorption_complete_times(self) -> List[datetime]:
        return [t + timedelta(minutes=d.absorption_minutes) for t, d in zip(self.times, self.drinks)]

    def sober_after(self) -> Optional[datetime]:
        """Instant after which every drink has been fully eliminated, None with no drinks."""
        if not self.drinks:
            return None
        return max(
            done + timedelta(hours=peak_from_grams(d.grams, self.weight_kg, self.r) / self.config.elimination_per_hour)
            for done, d in zip(self.absorption_complete_times(), self.drinks)
        )


def bac_at_time(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    at: datetime,
    config: ModelConfig = DEFAULT_CONFIG,
) -> float:
    """BAC (promille) at ``at`` from a list of drink events."""
    return PreparedDrinks(events, profile, config).bac_at(at)


def _sample(prepared: PreparedDrinks, start: datetime, end: datetime, step: timedelta) -> Iterator[ConcentrationSample]:
    t = start
    while t < end:
        yield ConcentrationSample(t, prepared.bac_at(t))
        t += step
    yield ConcentrationSample(end, prepared.bac_at(end))


def sample_prepared(
    prepared: PreparedDrinks,
    start: datetime,
    end: datetime,
    interval_minutes: Optional[float] = None,
) -> Iterator[ConcentrationSample]:
    """Samples of an already prepared log; see iter_bac_curve."""
    if interval_minutes is None:
        interval_minutes = prepared.config.sample_interval_minutes
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be > 0")
    if end <= start or not len(prepared):
        return iter(())
    return _sample(prepared, start, end, timedelta(minutes=interval_minutes))


def iter_bac_curve(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    start: datetime,
    end: datetime,
    interval_minutes: Optional[float] = None,
    config: ModelConfig = DEFAULT_CONFIG,
) -> Iterator[ConcentrationSample]:
    """Lazily yield (time, bac) samples from ``start`` to ``end``.

    Samples fall every ``interval_minutes`` (config default 5) from start and
    the last one is always exactly ``end``. Input is validated up front, so a
    bad drink raises here rather than on first iteration. An empty iterator
    means "no data yet" (no drinks, or end <= start).
    """
    return sample_prepared(PreparedDrinks(events, profile, config), start, end, interval_minutes)


def bac_curve(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    start: datetime,
    end: datetime,
    interval_minutes: Optional[float] = None,
    config: ModelConfig = DEFAULT_CONFIG,
) -> List[ConcentrationSample]:
    """Return (time, bac) samples for graphing."""
    return list(iter_bac_curve(events, profile, start, end, interval_minutes, config))
