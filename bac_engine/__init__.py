"""
BAC engine: two-phase per-drink promille model, curves, metrics and ranking.
Demo from project root: python -m bac_engine.main
"""

from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.errors import BacError, InvalidDrinkEvent, InvalidProfile
from bac_engine.models import ConcentrationSample, DrinkEvent, PhysiologicalProfile
from bac_engine.drinks import (
    DRINK_TYPES,
    alcohol_grams,
    grams_to_beer_units,
    infer_drink_category,
    list_drink_types,
    normalize_drink,
    total_alcohol_grams,
)
from bac_engine.calculations import (
    PreparedDrinks,
    bac_at_time,
    bac_curve,
    iter_bac_curve,
)
from bac_engine.metrics import (
    analytic_peak,
    classify_bac,
    format_bac,
    is_over_legal_limit,
    peak_in_window,
    peak_of_samples,
    session_peak,
    time_to_peak_minutes,
    time_to_sober_hours,
)
from bac_engine.ranking import RankedEntry, cohort_snapshot, rank_cohort
from bac_engine.session import Session
from bac_engine.gathering import Gathering, Participant
from bac_engine.chart import chart_series

__all__ = [
    "DEFAULT_CONFIG",
    "ModelConfig",
    "BacError",
    "InvalidDrinkEvent",
    "InvalidProfile",
    "ConcentrationSample",
    "DrinkEvent",
    "PhysiologicalProfile",
    "DRINK_TYPES",
    "alcohol_grams",
    "grams_to_beer_units",
    "infer_drink_category",
    "list_drink_types",
    "normalize_drink",
    "total_alcohol_grams",
    "PreparedDrinks",
    "bac_at_time",
    "bac_curve",
    "iter_bac_curve",
    "analytic_peak",
    "classify_bac",
    "format_bac",
    "is_over_legal_limit",
    "peak_in_window",
    "peak_of_samples",
    "session_peak",
    "time_to_peak_minutes",
    "time_to_sober_hours",
    "RankedEntry",
    "cohort_snapshot",
    "rank_cohort",
    "Session",
    "Gathering",
    "Participant",
    "chart_series",
]
