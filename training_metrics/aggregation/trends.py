from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..config import DURATION_LADDER
from ..load.pmc import interpret_tsb
from ..models.types import ActivitySummary, DailyTrainingLoad, PowerCurveEntry, ZoneBucket


def daily_load_frame(records: Sequence[DailyTrainingLoad]) -> pd.DataFrame:
    """PMC series with the form band of each day."""
    rows = []
    for r in records:
        rows.append(
            {
                "day": r.day,
                "date": r.date,
                "tss": r.tss,
                "ctl": r.ctl,
                "atl": r.atl,
                "tsb": r.tsb,
                "form": interpret_tsb(r.tsb).status,
            }
        )
    return pd.DataFrame(rows, columns=["day", "date", "tss", "ctl", "atl", "tsb", "form"])


def weekly_tss(records: Sequence[DailyTrainingLoad]) -> pd.DataFrame:
    """TSS totals per week (weeks start on Monday) with the CTL at the end of each week."""
    df = daily_load_frame(records)
    if df.empty or df["date"].isna().any():
        return pd.DataFrame(columns=["week_start", "tss", "days", "ctl_end"])
    dates = pd.to_datetime(df["date"])
    df["week_start"] = (dates - pd.to_timedelta(dates.dt.weekday, unit="D")).dt.date
    grouped = df.groupby("week_start").agg(
        tss=("tss", "sum"),
        days=("tss", "size"),
        ctl_end=("ctl", "last"),
    )
    return grouped.reset_index()


def curve_frame(curve: List[PowerCurveEntry]) -> pd.DataFrame:
    rows = []
    for e in curve:
        rows.append(
            {
                "duration": e.duration_label,
                "duration_s": e.duration_seconds,
                "watts": e.watts,
                "activity_id": e.activity_id,
                "activity_date": e.activity_date,
            }
        )
    return pd.DataFrame(rows, columns=["duration", "duration_s", "watts", "activity_id", "activity_date"])


def yearly_curve_frame(
    all_time: List[PowerCurveEntry],
    yearly: Dict[int, List[PowerCurveEntry]],
    ladder: Sequence = DURATION_LADDER,
) -> pd.DataFrame:
    """One row per scope ("all" then each year), one watts column per duration label.

    Durations no activity in a scope was long enough for are NaN.
    """
    labels = [label for _, label in ladder]
    rows = []
    for scope, curve in [("all", all_time)] + [(str(year), c) for year, c in sorted(yearly.items())]:
        row: Dict[str, Optional[float]] = {"scope": scope}
        by_label = {e.duration_label: e.watts for e in curve}
        for label in labels:
            row[label] = by_label.get(label)
        rows.append(row)
    return pd.DataFrame(rows, columns=["scope"] + labels)


def zone_frame(buckets: List[ZoneBucket]) -> pd.DataFrame:
    rows = []
    for b in buckets:
        rows.append(
            {
                "zone": b.zone_index + 1,
                "label": b.label,
                "seconds": b.seconds,
                "minutes": b.seconds / 60.0,
                "percent": b.percent,
                "color": b.color,
            }
        )
    return pd.DataFrame(rows, columns=["zone", "label", "seconds", "minutes", "percent", "color"])


def summarize_over_time(summaries: List[ActivitySummary]) -> pd.DataFrame:
    """Daily totals and means over activity summaries."""
    rows = []
    for s in summaries:
        p = s.power
        rows.append(
            {
                "date": s.activity_date,
                "activities": 1,
                "tss": p.training_stress_score if p else None,
                "normalized_power_w": p.normalized_power_w if p else None,
                "avg_power_w": p.average_power_w if p else None,
                "work_kj": p.work_kj if p else None,
                "distance_km": s.overall.distance_m / 1000.0 if s.overall else None,
                "elevation_gain_m": s.overall.elevation_gain_m if s.overall else None,
            }
        )
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    grouped = df.groupby("date").agg(
        activities=("activities", "sum"),
        tss=("tss", "sum"),
        normalized_power_w=("normalized_power_w", "mean"),
        avg_power_w=("avg_power_w", "mean"),
        work_kj=("work_kj", "sum"),
        distance_km=("distance_km", "sum"),
        elevation_gain_m=("elevation_gain_m", "sum"),
    )
    return grouped.reset_index()
