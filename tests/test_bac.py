"""Tests for drink normalization and the BAC model. Run from project root: pytest tests/ -v"""
import math
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from bac_engine.calculations import PreparedDrinks, bac_at_time, bac_curve, iter_bac_curve
from bac_engine.config import DEFAULT_CONFIG
from bac_engine.drinks import alcohol_grams, infer_drink_category, normalize_drink
from bac_engine.errors import InvalidDrinkEvent, InvalidProfile
from bac_engine.models import DrinkEvent, PhysiologicalProfile

T0 = datetime(2024, 1, 1, 12, 0)
MALE_80 = PhysiologicalProfile(80, "male")
FEMALE_65 = PhysiologicalProfile(65, "female")


def minutes(n):
    return T0 + timedelta(minutes=n)


def beer(at=T0, **modifiers):
    return DrinkEvent(500, 4.5, at, **modifiers)


def test_alcohol_grams():
    assert alcohol_grams(500, 4.5) == pytest.approx(17.7525)
    assert alcohol_grams(150, 12) == pytest.approx(14.202)
    assert alcohol_grams(40, 40) == pytest.approx(12.624)
    assert alcohol_grams(0, 40) == 0
    assert alcohol_grams(500, 0) == 0


def test_infer_drink_category_thresholds():
    assert infer_drink_category(0.5) == "beer"
    assert infer_drink_category(7.9) == "beer"
    assert infer_drink_category(8) == "wine"
    assert infer_drink_category(20) == "wine"
    assert infer_drink_category(20.1) == "spirits"


def test_absorption_minutes_by_category_and_modifiers():
    assert normalize_drink(beer()).absorption_minutes == 20
    assert normalize_drink(DrinkEvent(150, 12, T0)).absorption_minutes == 15
    assert normalize_drink(DrinkEvent(40, 40, T0)).absorption_minutes == 15
    assert normalize_drink(beer(food_consumed=True)).absorption_minutes == 40
    assert normalize_drink(beer(rapid_consumption=True)).absorption_minutes == 5
    # rapid wins over food
    assert normalize_drink(beer(food_consumed=True, rapid_consumption=True)).absorption_minutes == 5


@pytest.mark.parametrize("volume, strength", [(-1, 4.5), (500, -0.1), (500, 100.5)])
def test_invalid_drink_rejected(volume, strength):
    with pytest.raises(InvalidDrinkEvent):
        bac_at_time([DrinkEvent(volume, strength, T0)], MALE_80, minutes(30))


@pytest.mark.parametrize(
    "volume, strength",
    [(math.nan, 4.5), (math.inf, 4.5), (500, math.nan), (500, -math.inf)],
)
def test_non_finite_drink_rejected_not_dropped(volume, strength):
    events = [beer(), DrinkEvent(volume, strength, T0)]
    with pytest.raises(InvalidDrinkEvent):
        bac_at_time(events, MALE_80, minutes(20))


@pytest.mark.parametrize("weight", [math.nan, math.inf])
def test_non_finite_weight_rejected(weight):
    with pytest.raises(InvalidProfile):
        bac_at_time([beer()], PhysiologicalProfile(weight, "male"), minutes(20))


def test_one_invalid_drink_fails_whole_call():
    events = [beer(), DrinkEvent(-330, 4.5, minutes(10))]
    with pytest.raises(InvalidDrinkEvent):
        bac_at_time(events, MALE_80, minutes(30))


@pytest.mark.parametrize("profile", [PhysiologicalProfile(0, "male"), PhysiologicalProfile(-70, "female"), PhysiologicalProfile(80, "other")])
def test_invalid_profile_rejected(profile):
    with pytest.raises(InvalidProfile):
        bac_at_time([], profile, T0)


def test_no_drinks_is_zero_everywhere():
    for t in (T0, minutes(20), minutes(600)):
        assert bac_at_time([], MALE_80, t) == 0
    assert bac_curve([], MALE_80, T0, minutes(120)) == []


def test_single_beer_near_peak_and_gone_after_eight_hours():
    events = [beer()]
    bac = bac_at_time(events, MALE_80, minutes(20))
    assert 0.25 <= bac <= 0.35
    assert bac_at_time(events, MALE_80, minutes(8 * 60)) == 0


def test_single_beer_just_after_drinking_is_small():
    bac = bac_at_time([beer()], MALE_80, T0)
    assert 0 < bac < 0.1


def test_peak_at_absorption_completion():
    events = [beer()]
    at_peak = bac_at_time(events, MALE_80, minutes(20))
    assert at_peak > bac_at_time(events, MALE_80, minutes(15))
    assert at_peak > bac_at_time(events, MALE_80, minutes(25))
    expected = 17.7525 / (80 * 1000 * 0.68) * 1000
    assert at_peak == pytest.approx(expected, rel=0.05)


def test_reaches_zero_after_peak_over_elimination_rate_and_stays():
    prepared = PreparedDrinks([beer()], MALE_80)
    sober = prepared.sober_after()
    expected = minutes(20) + timedelta(hours=(17.7525 / 54.4) / 0.15)
    assert abs((sober - expected).total_seconds()) < 1
    assert prepared.bac_at(sober - timedelta(minutes=10)) > 0
    for later in (timedelta(minutes=1), timedelta(hours=1), timedelta(hours=5)):
        assert prepared.bac_at(sober + later) == 0


def test_rapid_consumption_higher_early():
    normal = bac_at_time([beer()], MALE_80, minutes(5))
    chugged = bac_at_time([beer(rapid_consumption=True)], MALE_80, minutes(5))
    assert chugged > normal


def test_food_lower_at_normal_peak():
    normal = bac_at_time([beer()], MALE_80, minutes(20))
    with_food = bac_at_time([beer(food_consumed=True)], MALE_80, minutes(20))
    assert with_food < normal


def test_unset_modifiers_behave_like_false():
    a = bac_at_time([beer()], MALE_80, minutes(12))
    b = bac_at_time([beer(food_consumed=False, rapid_consumption=False)], MALE_80, minutes(12))
    assert a == b


def test_female_higher_than_male():
    events = [beer()]
    assert bac_at_time(events, FEMALE_65, minutes(20)) > bac_at_time(events, MALE_80, minutes(20))


def test_overlapping_drinks_superpose():
    single = bac_at_time([beer()], MALE_80, minutes(30))
    double = bac_at_time([beer(), beer(minutes(30))], MALE_80, minutes(60))
    assert double > single
    assert double > bac_at_time([beer()], MALE_80, minutes(60))


def test_future_drink_contributes_nothing():
    assert bac_at_time([beer(minutes(60))], MALE_80, T0) == 0
    past_only = bac_at_time([beer()], MALE_80, minutes(30))
    with_future = bac_at_time([beer(), beer(minutes(90))], MALE_80, minutes(30))
    assert with_future == past_only


def test_eliminates_over_time_and_never_negative():
    events = [beer()]
    peak = bac_at_time(events, MALE_80, minutes(20))
    later = bac_at_time(events, MALE_80, minutes(120))
    assert peak - later > 0.2
    assert bac_at_time(events, MALE_80, minutes(24 * 60)) >= 0


def test_result_rounded_to_four_decimals_and_order_independent():
    events = [beer(), DrinkEvent(40, 40, minutes(17)), DrinkEvent(150, 12, minutes(41), food_consumed=True)]
    bac = bac_at_time(events, MALE_80, minutes(50))
    assert round(bac, 4) == bac
    assert bac_at_time(list(reversed(events)), MALE_80, minutes(50)) == bac


def test_config_is_injectable():
    fast = replace(DEFAULT_CONFIG, elimination_per_hour=0.3)
    events = [beer()]
    assert bac_at_time(events, MALE_80, minutes(90), config=fast) < bac_at_time(events, MALE_80, minutes(90))


def test_curve_cadence_and_exact_end():
    curve = bac_curve([beer()], MALE_80, T0, minutes(12), interval_minutes=5)
    assert [t for t, _ in curve] == [T0, minutes(5), minutes(10), minutes(12)]
    for t, bac in curve:
        assert bac == bac_at_time([beer()], MALE_80, t)


def test_curve_default_interval_is_five_minutes():
    curve = bac_curve([beer()], MALE_80, T0, minutes(30))
    assert len(curve) == 7
    assert curve[-1].time == minutes(30)


def test_curve_empty_when_end_not_after_start():
    assert bac_curve([beer()], MALE_80, minutes(30), minutes(30)) == []
    assert bac_curve([beer()], MALE_80, minutes(30), T0) == []


def test_curve_rejects_bad_interval():
    with pytest.raises(ValueError):
        bac_curve([beer()], MALE_80, T0, minutes(30), interval_minutes=0)


def test_iter_curve_validates_eagerly_and_runs_once():
    with pytest.raises(InvalidDrinkEvent):
        iter_bac_curve([DrinkEvent(-1, 5, T0)], MALE_80, T0, minutes(30))

    samples = iter_bac_curve([beer()], MALE_80, T0, minutes(30))
    assert len(list(samples)) == 7
    assert list(samples) == []
