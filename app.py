"""BAC engine HTTP API (Flask).

Thin JSON adapter over bac_engine: every request carries the profile and the
drink log snapshot, and the engine recomputes from it. "Now" is resolved
here, per request; the engine itself never reads the clock.

Run from project root:
    python app.py
"""

import logging
import math
import os
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from flask import Flask, jsonify, request

from bac_engine.calculations import PreparedDrinks, sample_prepared
from bac_engine.config import DEFAULT_CONFIG, ModelConfig
from bac_engine.errors import BacError
from bac_engine.gathering import Gathering, Participant
from bac_engine.metrics import (
    classify_bac,
    format_bac,
    is_over_legal_limit,
    peak_of_samples,
    time_to_peak_minutes,
    time_to_sober_hours,
)
from bac_engine.models import DrinkEvent, PhysiologicalProfile

logging.basicConfig(
    level=os.environ.get("BAC_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("bac_engine.app")

app = Flask(__name__)

MAX_DRINKS = 500
MAX_SAMPLES = 10_000


class PayloadError(ValueError):
    """Request JSON is missing fields or has the wrong types."""


def _model_config() -> ModelConfig:
    interval = os.environ.get("BAC_SAMPLE_INTERVAL_MINUTES")
    if not interval:
        return DEFAULT_CONFIG
    try:
        minutes = float(interval)
    except ValueError:
        minutes = math.nan
    if not math.isfinite(minutes) or minutes <= 0:
        logger.warning("ignoring BAC_SAMPLE_INTERVAL_MINUTES=%r", interval)
        return DEFAULT_CONFIG
    return replace(DEFAULT_CONFIG, sample_interval_minutes=minutes)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any, name: str) -> datetime:
    if not isinstance(value, str):
        raise PayloadError(f"{name} must be an ISO 8601 timestamp")
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise PayloadError(f"{name} must be an ISO 8601 timestamp")
    # Naive timestamps are taken as UTC so they compare with "now".
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_optional_time(data: dict, name: str) -> datetime:
    if data.get(name) is None:
        return _now()
    return _parse_time(data[name], name)


def _parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise PayloadError(f"{name} must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise PayloadError(f"{name} must be a number")
    if not math.isfinite(parsed):
        raise PayloadError(f"{name} must be a finite number")
    return parsed


def _parse_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y"}:
            return True
        if lowered in {"false", "0", "no", "n", ""}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    raise PayloadError(f"expected a boolean, got {value!r}")


def _parse_profile(raw: Any) -> PhysiologicalProfile:
    if not isinstance(raw, dict):
        raise PayloadError("profile must be an object")
    gender = str(raw.get("gender", "")).strip().lower()
    return PhysiologicalProfile(weight_kg=_parse_float(raw.get("weight_kg"), "profile.weight_kg"), gender=gender)


def _parse_drinks(raw: Any) -> list[DrinkEvent]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise PayloadError("drinks must be a list")
    if len(raw) > MAX_DRINKS:
        raise PayloadError(f"at most {MAX_DRINKS} drinks per request")
    events = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise PayloadError(f"drinks[{i}] must be an object")
        events.append(
            DrinkEvent(
                volume_ml=_parse_float(item.get("volume_ml"), f"drinks[{i}].volume_ml"),
                alcohol_percentage=_parse_float(item.get("alcohol_percentage"), f"drinks[{i}].alcohol_percentage"),
                consumed_at=_parse_time(item.get("consumed_at"), f"drinks[{i}].consumed_at"),
                food_consumed=_parse_bool(item.get("food_consumed")),
                rapid_consumption=_parse_bool(item.get("rapid_consumption")),
            )
        )
    return events


def _parse_participants(raw: Any) -> list[Participant]:
    if not isinstance(raw, list):
        raise PayloadError("participants must be a list")
    out = []
    seen = set()
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("id"):
            raise PayloadError(f"participants[{i}] needs an id")
        pid = str(item["id"])
        if pid in seen:
            raise PayloadError(f"participants[{i}] repeats id {pid!r}")
        seen.add(pid)
        out.append(
            Participant(
                id=pid,
                name=str(item.get("name") or pid),
                profile=_parse_profile(item.get("profile")),
                events=_parse_drinks(item.get("drinks")),
            )
        )
    return out


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise PayloadError("request body must be a JSON object")
    return data


def _check_sample_count(start: datetime, end: datetime, interval_minutes: float) -> None:
    if end <= start:
        return
    if (end - start).total_seconds() / 60.0 / interval_minutes > MAX_SAMPLES:
        raise PayloadError(f"at most {MAX_SAMPLES} samples per request; shorten the window or widen the interval")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@app.errorhandler(BacError)
@app.errorhandler(PayloadError)
def handle_invalid_input(exc: ValueError):
    logger.info("rejected %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": str(exc)}), 400


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/bac", methods=["POST"])
def api_bac():
    data = _json_body()
    config = _model_config()
    profile = _parse_profile(data.get("profile"))
    drinks = _parse_drinks(data.get("drinks"))
    at = _parse_optional_time(data, "at")

    bac = PreparedDrinks(drinks, profile, config).bac_at(at)
    return jsonify({
        "at": _iso(at),
        "bac": bac,
        "formatted": format_bac(bac),
        "level": classify_bac(bac, config),
        "over_legal_limit": is_over_legal_limit(bac, config),
        "hours_until_sober": round(time_to_sober_hours(bac, config), 2),
        "minutes_until_peak": round(time_to_peak_minutes(drinks, at, config), 1),
        "drink_count": len(drinks),
    })


@app.route("/api/curve", methods=["POST"])
def api_curve():
    data = _json_body()
    config = _model_config()
    profile = _parse_profile(data.get("profile"))
    drinks = _parse_drinks(data.get("drinks"))
    start = _parse_time(data.get("start"), "start")
    end = _parse_optional_time(data, "end")
    interval = data.get("interval_minutes")
    if interval is not None:
        interval = _parse_float(interval, "interval_minutes")
        if interval <= 0:
            raise PayloadError("interval_minutes must be > 0")
    _check_sample_count(start, end, interval if interval is not None else config.sample_interval_minutes)

    samples = list(sample_prepared(PreparedDrinks(drinks, profile, config), start, end, interval))
    peak_bac, peak_time = peak_of_samples(samples)
    return jsonify({
        "points": [{"time": _iso(t), "bac": bac} for t, bac in samples],
        "peak_bac": peak_bac,
        "peak_time": _iso(peak_time),
    })


@app.route("/api/leaderboard", methods=["POST"])
def api_leaderboard():
    data = _json_body()
    participants = _parse_participants(data.get("participants"))
    at = _parse_optional_time(data, "at")
    start = _parse_time(data["start"], "start") if data.get("start") else at
    end = _parse_time(data["end"], "end") if data.get("end") else at
    config = _model_config()
    _check_sample_count(start, min(end, at), config.sample_interval_minutes)

    gathering = Gathering(start=start, end=end, participants=participants, config=config)
    rows = gathering.leaderboard(at)
    return jsonify({
        "at": _iso(at),
        "leaderboard": [
            {
                "rank": row.rank,
                "id": row.id,
                "name": row.name,
                "bac": row.bac,
                "drink_count": row.drink_count,
                "peak_bac": row.peak_bac,
            }
            for row in rows
        ],
    })


@app.route("/api/gathering/stats", methods=["POST"])
def api_gathering_stats():
    data = _json_body()
    participants = _parse_participants(data.get("participants"))
    start = _parse_time(data.get("start"), "start")
    end = _parse_time(data.get("end"), "end")
    now = _parse_optional_time(data, "now")
    config = _model_config()
    _check_sample_count(start, min(end, now), config.sample_interval_minutes)

    stats = Gathering(start=start, end=end, participants=participants, config=config).stats(now)
    return jsonify({
        "average_peak_bac": round(stats.average_peak_bac, 4),
        "max_peak_bac": stats.max_peak_bac,
        "total_participants": stats.total_participants,
        "participants_over_limit": stats.participants_over_limit,
    })


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
