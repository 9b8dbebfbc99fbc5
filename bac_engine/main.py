"""
BAC engine CLI demo. Run from project root: python -m bac_engine.main
Builds a sample session, prints BAC at a few points and the sampled curve.
"""

import argparse
import sys
from datetime import datetime, timedelta

from bac_engine.metrics import classify_bac, format_bac, is_over_legal_limit
from bac_engine.models import PhysiologicalProfile
from bac_engine.session import Session


def main(argv=None):
    parser = argparse.ArgumentParser(description="BAC engine demo: two beers and a shot, promille over time")
    parser.add_argument("--weight", type=float, default=80.0, help="Body weight (kg)")
    parser.add_argument("--female", action="store_true", help="Female (default male)")
    parser.add_argument("--food", action="store_true", help="Drinks taken with food")
    parser.add_argument("--rapid", action="store_true", help="Drinks chugged")
    parser.add_argument("--hours", type=float, default=4.0, help="Hours to chart from the first drink")
    parser.add_argument("--interval", type=float, default=15.0, help="Minutes between printed samples")
    args = parser.parse_args(argv)

    session = Session(PhysiologicalProfile(args.weight, "female" if args.female else "male"))
    start = datetime(2024, 1, 1, 20, 0)
    modifiers = {"food_consumed": args.food, "rapid_consumption": args.rapid}
    session.add_preset(start, "beer", **modifiers)
    session.add_preset(start + timedelta(minutes=30), "beer", **modifiers)
    session.add_preset(start + timedelta(minutes=60), "spirits", **modifiers)
    print(f"Demo session: {session.drink_count} drinks, {session.total_grams:.1f} g ethanol "
          f"({session.beer_units:.1f} beer units)")

    end = start + timedelta(hours=args.hours)
    for t, bac in session.curve(start, end, interval_minutes=args.interval):
        flag = " over limit" if is_over_legal_limit(bac) else ""
        print(f"  {t:%H:%M}  {format_bac(bac):>7}  {classify_bac(bac)}{flag}")

    print(f"Peak: {format_bac(session.peak(start, end))}")
    print(f"Hours until sober at {end:%H:%M}: {session.hours_until_sober(end):.1f}h")
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
