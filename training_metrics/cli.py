from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .config import get_config
from .load.insights import training_insights
from .load.pmc import (
    TrainingLoadModel,
    current_state,
    daily_tss_from_activities,
    fill_missing_days,
    interpret_tsb,
    ramp_rate,
)
from .metrics.activity import ActivityMetricsCalculator
from .metrics.curve import of_sport, power_curves_by_year
from .metrics.profile import classify_rider
from .models.athlete_profile import AthleteProfile, load_athlete_profile
from .models.types import Activity, PowerCurveEntry, RiderProfile, StreamSet
from .storage.export import (
    export_daily_load_csv,
    export_daily_tss_csv,
    export_power_curve_csv,
    export_splits_csv,
    export_yearly_curves_csv,
)

logger = logging.getLogger(__name__)

STREAM_KEYS = ("distance", "time", "altitude", "heartrate", "watts", "cadence", "latlng")


def load_activity_json(path: str) -> Activity:
    """Read one activity: scalar fields plus a ``streams`` object of sample arrays."""
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid activity file {path}: {e}") from e

    if "start_date" not in data:
        raise ValueError(f"Activity file {path} has no start_date")
    raw_streams = data.get("streams") or {}
    streams = StreamSet(**{k: raw_streams[k] for k in STREAM_KEYS if raw_streams.get(k) is not None})
    return Activity(
        activity_id=int(data.get("id", 0)),
        start_date=pd.to_datetime(data["start_date"], utc=True).to_pydatetime(),
        streams=streams,
        activity_type=data.get("type"),
        moving_time_s=data.get("moving_time"),
        elapsed_time_s=data.get("elapsed_time"),
        distance_m=data.get("distance"),
        average_speed_mps=data.get("average_speed"),
        max_speed_mps=data.get("max_speed"),
        total_elevation_gain_m=data.get("total_elevation_gain"),
    )


def _athlete_from_args(args: argparse.Namespace) -> AthleteProfile:
    if args.athlete_dir:
        athlete = load_athlete_profile(Path(args.athlete_dir))
    else:
        athlete = AthleteProfile(name="athlete")
    # Command line values override the stored profile
    if args.ftp is not None:
        athlete.ftp_watts = args.ftp
    if args.weight is not None:
        athlete.weight_kg = args.weight
    if getattr(args, "max_hr", None) is not None:
        athlete.max_hr_bpm = args.max_hr
    return athlete


def _classify(curve: List[PowerCurveEntry], weight_kg: Optional[float]) -> RiderProfile:
    profile = get_config().profile
    return classify_rider(
        curve,
        weight_kg,
        benchmarks=profile.benchmarks,
        tie_order=profile.tie_order,
        tie_epsilon=profile.tie_epsilon,
        labels=profile.labels,
    )


def _run_activity(args: argparse.Namespace) -> None:
    athlete = _athlete_from_args(args)
    activity = load_activity_json(args.input)
    summary = ActivityMetricsCalculator(get_config()).calculate_activity_metrics(activity, athlete)

    power = summary.power
    insights = training_insights(
        power.training_stress_score if power else None,
        power.intensity_factor if power else None,
    )
    rider = _classify(summary.power_curve, athlete.weight_kg)

    payload = asdict(summary)
    payload["insights"] = asdict(insights)
    payload["rider_profile"] = asdict(rider)
    text = json.dumps(payload, indent=2, default=str)

    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
        print(f"Wrote activity summary: {args.output}")
    else:
        print(text)

    if args.splits_csv:
        export_splits_csv(summary.splits, args.splits_csv)
        print(f"Wrote splits CSV: {args.splits_csv} ({len(summary.splits)} splits)")


def _read_daily_tss(path: str) -> Dict:
    df = pd.read_csv(path)
    missing = {"date", "tss"} - set(df.columns)
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(sorted(missing))}")
    df["date"] = pd.to_datetime(df["date"]).dt.date
    return df.groupby("date")["tss"].sum().to_dict()


def _run_pmc(args: argparse.Namespace) -> None:
    tss_by_date = _read_daily_tss(args.input)
    if not tss_by_date:
        print("No daily TSS rows found.")
        return
    start = pd.to_datetime(args.start).date() if args.start else min(tss_by_date)
    end = pd.to_datetime(args.end).date() if args.end else max(tss_by_date)

    load = get_config().load
    model = TrainingLoadModel(ctl_days=load.ctl_days, atl_days=load.atl_days)
    records = model.compute_dated(
        fill_missing_days(tss_by_date, start, end),
        initial_ctl=args.initial_ctl,
        initial_atl=args.initial_atl,
    )
    export_daily_load_csv(records, args.output)
    print(f"Wrote PMC CSV: {args.output} ({len(records)} days)")

    last = current_state(records)
    form = interpret_tsb(last.tsb)
    ramp = ramp_rate(records, unsafe_pct=load.ramp_unsafe_pct, loss_pct=load.ramp_loss_pct)
    print(f"{last.date}: CTL {last.ctl:.1f}, ATL {last.atl:.1f}, TSB {last.tsb:.1f} ({form.description})")
    print(f"Recommendation: {form.recommendation}")
    if ramp.percent_per_week is not None:
        print(f"Ramp rate: {ramp.percent_per_week:+.1f}%/week ({ramp.status})")


def _run_daily_tss(args: argparse.Namespace) -> None:
    activities: List[Activity] = [load_activity_json(p) for p in args.inputs]
    ftp = args.ftp
    if ftp is None and args.athlete_dir:
        ftp = load_athlete_profile(Path(args.athlete_dir)).ftp_watts
    include = of_sport(*args.type) if args.type else None
    tss_by_date = daily_tss_from_activities(
        activities, ftp, window_s=get_config().power.np_window_s, include=include
    )
    export_daily_tss_csv(tss_by_date, args.output)
    print(f"Wrote daily TSS CSV: {args.output} ({len(tss_by_date)} days)")


def _run_curve(args: argparse.Namespace) -> None:
    activities: List[Activity] = [load_activity_json(p) for p in args.inputs]
    if not activities:
        print("No activity files found.")
        return
    include = of_sport(*args.type) if args.type else None
    ladder = get_config().power.duration_ladder
    all_time, yearly = power_curves_by_year(activities, ladder, include=include)

    os.makedirs(args.output, exist_ok=True)
    all_path = os.path.join(args.output, "power_curve_all_time.csv")
    yearly_path = os.path.join(args.output, "power_curves_yearly.csv")
    export_power_curve_csv(all_time, all_path)
    export_yearly_curves_csv(all_time, yearly, yearly_path, ladder=ladder)
    print(f"Wrote all-time power curve CSV: {all_path} ({len(all_time)} durations)")
    print(f"Wrote yearly power curves CSV: {yearly_path} ({len(yearly)} years)")

    if args.weight is not None:
        rider = _classify(all_time, args.weight)
        print(f"Rider type: {rider.rider_type or 'unavailable'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Training metrics CLI: activity summaries, PMC and power curves")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    act = sub.add_parser("activity", help="Summarize one activity JSON file")
    act.add_argument("input", help="Activity JSON file with a streams object")
    act.add_argument("--athlete-dir", help="Directory holding the athlete's profile.json")
    act.add_argument("--ftp", type=float, help="FTP in watts (overrides the profile)")
    act.add_argument("--weight", type=float, help="Weight in kg (overrides the profile)")
    act.add_argument("--max-hr", type=float, help="Max heart rate in bpm (overrides the profile)")
    act.add_argument("--output", help="Write the JSON summary here instead of stdout")
    act.add_argument("--splits-csv", help="Also write the per-km splits to this CSV")
    act.set_defaults(func=_run_activity)

    pmc = sub.add_parser("pmc", help="Compute CTL/ATL/TSB from a date,tss CSV")
    pmc.add_argument("input", help="CSV with date and tss columns")
    pmc.add_argument("--output", required=True, help="Output CSV path")
    pmc.add_argument("--start", help="First day (default: first date in the input)")
    pmc.add_argument("--end", help="Last day (default: last date in the input)")
    pmc.add_argument("--initial-ctl", type=float, default=0.0, help="CTL before the first day (default: 0)")
    pmc.add_argument("--initial-atl", type=float, default=0.0, help="ATL before the first day (default: 0)")
    pmc.set_defaults(func=_run_pmc)

    tss = sub.add_parser("daily-tss", help="Daily TSS CSV (input for pmc) from activity JSON files")
    tss.add_argument("inputs", nargs="+", help="Activity JSON files")
    tss.add_argument("--output", required=True, help="Output CSV path")
    tss.add_argument("--athlete-dir", help="Directory holding the athlete's profile.json")
    tss.add_argument("--ftp", type=float, help="FTP in watts (overrides the profile)")
    tss.add_argument(
        "--type", action="append", help="Only include this activity type; Ride and Run include their virtual variants"
    )
    tss.set_defaults(func=_run_daily_tss)

    curve = sub.add_parser("curve", help="All-time and yearly power curves from activity JSON files")
    curve.add_argument("inputs", nargs="+", help="Activity JSON files")
    curve.add_argument("--output", required=True, help="Output directory for the curve CSVs")
    curve.add_argument(
        "--type", action="append", help="Only include this activity type; Ride and Run include their virtual variants"
    )
    curve.add_argument("--weight", type=float, help="Weight in kg, to classify the rider type")
    curve.set_defaults(func=_run_curve)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
