"""
BAC-over-time chart data. Returns plain series for any frontend; no drawing here.
"""

from datetime import datetime
from typing import Any, Dict, List

from bac_engine.gathering import Gathering


def chart_series(gathering: Gathering, now: datetime) -> List[Dict[str, Any]]:
    """One line per participant: x = minutes since gathering start (1 decimal), y = bac."""
    series = []
    for s in gathering.bac_series(now):
        data = [
            {"x": round((t - gathering.start).total_seconds() / 60.0, 1), "y": bac}
            for t, bac in s.samples
        ]
        series.append({"id": s.id, "label": s.name, "data": data})
    return series
