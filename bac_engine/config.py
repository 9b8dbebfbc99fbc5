"""Tunable constants for the BAC model.

All numbers the engine depends on live in one frozen ModelConfig. Pass a
different instance (see dataclasses.replace) to any engine function through
its ``config=`` keyword to try an alternate tuning.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple


def _default_distribution_constants() -> Dict[str, float]:
    # Widmark r
    return {"male": 0.68, "female": 0.55}


def _default_absorption_minutes() -> Dict[str, float]:
    return {"beer": 20.0, "wine": 15.0, "spirits": 15.0}


def _default_levels() -> Tuple[Tuple[float, str], ...]:
    # (exclusive upper bound in promille, label); 0 itself is "sober".
    return (
        (0.2, "minimal"),
        (0.5, "mild"),
        (0.8, "reduced_coordination"),
        (1.5, "clearly_impaired"),
        (3.0, "heavily_impaired"),
    )


@dataclass(frozen=True)
class ModelConfig:
    """Physiological tuning for the two-phase promille model."""

    elimination_per_hour: float = 0.15  # promille per hour
    ethanol_density: float = 0.789  # g/ml
    distribution_constants: Dict[str, float] = field(default_factory=_default_distribution_constants)

    # Strength thresholds (% ABV): below beer_max -> beer, up to wine_max -> wine.
    beer_max_percentage: float = 8.0
    wine_max_percentage: float = 20.0
    absorption_minutes: Dict[str, float] = field(default_factory=_default_absorption_minutes)
    rapid_absorption_minutes: float = 5.0
    food_absorption_factor: float = 2.0

    # Share of the normal elimination rate applied while a drink is still absorbing.
    absorption_elimination_factor: float = 0.1
    # Logistic steepness is this value divided by the absorption duration.
    absorption_steepness: float = 8.0

    legal_limit: float = 0.8
    sober_label: str = "sober"
    top_label: str = "life_threatening"
    levels: Tuple[Tuple[float, str], ...] = field(default_factory=_default_levels)

    sample_interval_minutes: float = 5.0
    # Session peak window: first drink until this long after the last drink.
    peak_window_after_last_drink_hours: float = 2.0
    precision: int = 4

    # Beer unit used for "number of beers" summaries: 330 ml at 5%.
    beer_unit_ml: float = 330.0
    beer_unit_percentage: float = 5.0


DEFAULT_CONFIG = ModelConfig()
