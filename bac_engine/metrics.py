"""Values derived from a BAC curve: peak, time to peak, time to sober, level."""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from bac_engine.calculations import PreparedDrinks, sample_prepared
from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.drinks import normalize_drink
from bac_engine.models import ConcentrationSample, DrinkEvent, PhysiologicalProfile

Peak = Tuple[float, Optional[datetime]]


def peak_of_samples(samples: Iterable[ConcentrationSample]) -> Peak:
    """(max bac, time of its first occurrence); (0.0, None) when nothing rises above 0."""
    peak_bac = 0.0
    peak_time = None
    for time, bac in samples:
        if bac > peak_bac:
            peak_bac, peak_time = bac, time
    return peak_bac, peak_time


def analytic_peak(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    config: ModelConfig = DEFAULT_CONFIG,
) -> Peak:
    """Peak evaluated only at each drink's absorption-completion instant."""
    prepared = PreparedDrinks(events, profile, config)
    candidates = sorted(prepared.absorption_complete_times())
    return peak_of_samples(ConcentrationSample(t, prepared.bac_at(t)) for t in candidates)


def peak_in_window(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    start: datetime,
    end: datetime,
    interval_minutes: Optional[float] = None,
    config: ModelConfig = DEFAULT_CONFIG,
) -> float:
    """Highest BAC reached between ``start`` and ``end``.

    Samples the regular cadence and additionally every consumption and
    absorption-completion instant inside the window, so short rapid drinks
    are not missed between samples. This is the scalar fed to badge checks.
    """
    prepared = PreparedDrinks(events, profile, config)
    peak, _ = peak_of_samples(sample_prepared(prepared, start, end, interval_minutes))
    for t in prepared.times + prepared.absorption_complete_times():
        if start <= t <= end:
            peak = max(peak, prepared.bac_at(t))
    return peak


def session_peak(
    events: Iterable[DrinkEvent],
    profile: PhysiologicalProfile,
    config: ModelConfig = DEFAULT_CONFIG,
) -> float:
    """Peak from the first drink until a fixed time after the last one."""
    events = list(events)
    if not events:
        return 0.0
    times = [e.consumed_at for e in events]
    end = max(times) + timedelta(hours=config.peak_window_after_last_drink_hours)
    return peak_in_window(events, profile, min(times), end, config=config)


def time_to_peak_minutes(
    events: Iterable[DrinkEvent],
    now: datetime,
    config: ModelConfig = DEFAULT_CONFIG,
) -> float:
    """Minutes from ``now`` until the last drink still absorbing is fully absorbed; 0 if none."""
    latest = 0.0
    for event in events:
        done = event.consumed_at + timedelta(minutes=normalize_drink(event, config).absorption_minutes)
        latest = max(latest, (done - now).total_seconds() / 60.0)
    return latest


def time_to_sober_hours(bac: float, config: ModelConfig = DEFAULT_CONFIG) -> float:
    if bac <= 0:
        return 0.0
    return bac / config.elimination_per_hour


def classify_bac(bac: float, config: ModelConfig = DEFAULT_CONFIG) -> str:
    """Qualitative level for a promille value; the first band it falls under wins."""
    if bac <= 0:
        return config.sober_label
    for upper, label in config.levels:
        if bac < upper:
            return label
    return config.top_label


def is_over_legal_limit(bac: float, config: ModelConfig = DEFAULT_CONFIG) -> bool:
    return bac >= config.legal_limit


def format_bac(bac: float) -> str:
    return f"{bac:.2f}‰"
