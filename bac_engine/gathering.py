"""
Shared, time-boxed gathering: several participants' BAC compared and charted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from bac_engine.calculations import PreparedDrinks, sample_prepared
from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.errors import InvalidGathering
from bac_engine.metrics import is_over_legal_limit, peak_in_window, peak_of_samples
from bac_engine.models import ConcentrationSample, DrinkEvent, PhysiologicalProfile
from bac_engine.ranking import CohortSnapshot, cohort_snapshot, rank_cohort


@dataclass
class Participant:
    id: str
    name: str
    profile: PhysiologicalProfile
    events: List[DrinkEvent] = field(default_factory=list)


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    id: str
    name: str
    bac: float
    drink_count: int
    peak_bac: float


@dataclass(frozen=True)
class ParticipantSeries:
    id: str
    name: str
    samples: List[ConcentrationSample]
    peak_bac: float
    peak_time: Optional[datetime]


@dataclass(frozen=True)
class GatheringStats:
    average_peak_bac: float
    max_peak_bac: float
    total_participants: int
    participants_over_limit: int


@dataclass
class Gathering:
    start: datetime
    end: datetime
    participants: List[Participant] = field(default_factory=list)
    config: ModelConfig = DEFAULT_CONFIG

    def __post_init__(self):
        ids = [p.id for p in self.participants]
        if len(ids) != len(set(ids)):
            raise InvalidGathering("participant ids must be unique")

    def effective_end(self, now: datetime) -> datetime:
        """Scheduled end for a finished gathering, ``now`` for an ongoing one."""
        return min(self.end, now)

    def snapshot(self, at: datetime) -> CohortSnapshot:
        return cohort_snapshot({p.id: (p.profile, p.events) for p in self.participants}, at, self.config)

    def leaderboard(self, at: datetime) -> List[LeaderboardRow]:
        by_id = {p.id: p for p in self.participants}
        end = self.effective_end(at)
        rows = []
        for entry in rank_cohort(self.snapshot(at)):
            p = by_id[entry.person_id]
            peak = max(entry.bac, peak_in_window(p.events, p.profile, self.start, end, config=self.config))
            rows.append(LeaderboardRow(entry.rank, p.id, p.name, entry.bac, len(p.events), peak))
        return rows

    def bac_series(self, now: datetime) -> List[ParticipantSeries]:
        end = self.effective_end(now)
        out = []
        for p in self.participants:
            prepared = PreparedDrinks(p.events, p.profile, self.config)
            samples = list(sample_prepared(prepared, self.start, end))
            peak_bac, peak_time = peak_of_samples(samples)
            out.append(ParticipantSeries(p.id, p.name, samples, peak_bac, peak_time))
        return out

    def stats(self, now: datetime) -> GatheringStats:
        end = self.effective_end(now)
        peaks = [
            peak_in_window(p.events, p.profile, self.start, end, config=self.config)
            for p in self.participants
        ]
        if not peaks:
            return GatheringStats(0.0, 0.0, 0, 0)
        return GatheringStats(
            average_peak_bac=sum(peaks) / len(peaks),
            max_peak_bac=max(peaks),
            total_participants=len(peaks),
            participants_over_limit=sum(1 for bac in peaks if is_over_legal_limit(bac, self.config)),
        )
