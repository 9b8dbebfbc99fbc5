"""Leaderboard of several people's BAC at one shared instant."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Tuple, Union

from bac_engine.calculations import bac_at_time
from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.models import DrinkEvent, PhysiologicalProfile

# person id -> bac, in the order the caller listed the people
CohortSnapshot = Dict[str, float]


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    person_id: str
    bac: float


def cohort_snapshot(
    people: Mapping[str, Tuple[PhysiologicalProfile, Iterable[DrinkEvent]]],
    at: datetime,
    config: ModelConfig = DEFAULT_CONFIG,
) -> CohortSnapshot:
    """Each person's BAC at the same instant, computed independently."""
    return {
        person_id: bac_at_time(events, profile, at, config)
        for person_id, (profile, events) in people.items()
    }


def rank_cohort(snapshot: Union[Mapping[str, float], Iterable[Tuple[str, float]]]) -> List[RankedEntry]:
    """Highest BAC first, ranks from 1; equal values keep their input order."""
    items = list(snapshot.items()) if isinstance(snapshot, Mapping) else list(snapshot)
    # sorted() is stable, also with reverse=True
    ordered = sorted(items, key=lambda item: item[1], reverse=True)
    return [RankedEntry(rank=i, person_id=pid, bac=bac) for i, (pid, bac) in enumerate(ordered, start=1)]
