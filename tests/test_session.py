"""Session (one person's drink log) and CLI demo."""
from datetime import datetime, timedelta

import pytest

from bac_engine.drinks import grams_to_beer_units, list_drink_types
from bac_engine.main import main
from bac_engine.models import PhysiologicalProfile
from bac_engine.session import Session

T0 = datetime(2024, 1, 1, 20, 0)


def minutes(n):
    return T0 + timedelta(minutes=n)


def test_drink_types_listed():
    keys = [k for k, _ in list_drink_types()]
    assert keys == ["beer", "wine", "spirits"]


def test_beer_units():
    assert grams_to_beer_units(330 * 0.05 * 0.789) == pytest.approx(1.0)


def test_session_add_and_totals():
    s = Session(PhysiologicalProfile(80, "male"))
    s.add_preset(minutes(30), "beer")
    s.add_preset(T0, "beer")
    assert s.drink_count == 2
    assert [e.consumed_at for e in s.events] == [T0, minutes(30)]
    assert s.total_grams == pytest.approx(2 * 17.7525)
    assert s.beer_units > 2


def test_session_queries():
    s = Session(PhysiologicalProfile(80, "male"))
    s.add_drink(T0, 500, 4.5)
    s.add_drink(minutes(30), 500, 4.5, food_consumed=True)
    assert s.bac_at(minutes(60)) > s.bac_at(minutes(20)) > 0
    assert s.time_to_peak(minutes(30)) == 40
    assert s.hours_until_sober(minutes(60)) > 0
    assert s.hours_until_sober(minutes(24 * 60)) == 0
    curve = s.curve(T0, minutes(60))
    assert curve[-1].time == minutes(60)
    assert s.peak(T0, minutes(180)) >= max(bac for _, bac in curve)


def test_session_remove_event():
    s = Session(PhysiologicalProfile(80, "male"))
    event = s.add_preset(T0, "spirits", rapid_consumption=True)
    assert s.bac_at(minutes(5)) > 0
    s.remove_event(event)
    assert s.drink_count == 0
    assert s.bac_at(minutes(5)) == 0


def test_unknown_preset():
    s = Session(PhysiologicalProfile(80, "male"))
    with pytest.raises(KeyError):
        s.add_preset(T0, "cider")


def test_cli_demo(capsys):
    assert main(["--weight", "70", "--female", "--hours", "2"]) == 0
    out = capsys.readouterr().out
    assert "Demo session: 3 drinks" in out
    assert "Peak:" in out
