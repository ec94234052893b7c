from __future__ import annotations

from datetime import date
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from ..aggregation.trends import curve_frame, daily_load_frame, yearly_curve_frame, zone_frame
from ..config import DURATION_LADDER
from ..models.types import DailyTrainingLoad, PowerCurveEntry, Split, ZoneBucket


def export_daily_load_csv(records: Sequence[DailyTrainingLoad], path: str) -> None:
    df = daily_load_frame(records)
    df.to_csv(path, index=False)


def export_power_curve_csv(curve: List[PowerCurveEntry], path: str) -> None:
    df = curve_frame(curve)
    df.to_csv(path, index=False)


def export_yearly_curves_csv(
    all_time: List[PowerCurveEntry],
    yearly: Dict[int, List[PowerCurveEntry]],
    path: str,
    ladder: Sequence[Tuple[int, str]] = DURATION_LADDER,
) -> None:
    df = yearly_curve_frame(all_time, yearly, ladder=ladder)
    df.to_csv(path, index=False)


def export_zones_csv(buckets: List[ZoneBucket], path: str) -> None:
    df = zone_frame(buckets)
    df.to_csv(path, index=False)


def export_splits_csv(splits: List[Split], path: str) -> None:
    rows = []
    for s in splits:
        row = {
            "split": s.split_number,
            "distance_m": s.distance_m,
            "time_s": s.time_s,
            "pace_s_per_km": s.pace_s_per_km,
            "avg_hr_bpm": s.average_heart_rate_bpm,
            "partial": s.is_partial,
        }
        rows.append(row)
    df = pd.DataFrame(rows, columns=["split", "distance_m", "time_s", "pace_s_per_km", "avg_hr_bpm", "partial"])
    df.to_csv(path, index=False)


def export_daily_tss_csv(tss_by_date: Dict[date, float], path: str) -> None:
    rows = [{"date": d, "tss": tss} for d, tss in sorted(tss_by_date.items())]
    df = pd.DataFrame(rows, columns=["date", "tss"])
    df.to_csv(path, index=False)
