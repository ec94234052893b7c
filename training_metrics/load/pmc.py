"""Performance Management Chart: CTL, ATL and TSB from daily TSS.

The recurrence is a sequential scan over a gap-free daily sequence:

    ctl[d] = tss[d] * kC + ctl[d-1] * (1 - kC),   kC = 2 / (ctl_days + 1)
    atl[d] = tss[d] * kA + atl[d-1] * (1 - kA),   kA = 2 / (atl_days + 1)
    tsb[d] = ctl[d-1] - atl[d-1]

TSB is the form entering day d, taken from the previous day's state.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ..config import ATL_DAYS, CTL_DAYS, NP_WINDOW_S, RAMP_LOSS_PCT, RAMP_UNSAFE_PCT
from ..metrics.curve import ActivityFilter
from ..metrics.power import compute_power_metrics
from ..models.types import Activity, DailyTrainingLoad, RampRate, TsbInterpretation

logger = logging.getLogger(__name__)


def ema_constant(time_constant_days: int) -> float:
    if time_constant_days <= 0:
        raise ValueError(f"Time constant must be > 0 days, got {time_constant_days}")
    return 2.0 / (time_constant_days + 1)


class TrainingLoadModel:
    """Fitness/fatigue/form model over a continuous daily TSS sequence."""

    def __init__(self, ctl_days: int = CTL_DAYS, atl_days: int = ATL_DAYS):
        self.ctl_days = ctl_days
        self.atl_days = atl_days
        self.k_ctl = ema_constant(ctl_days)
        self.k_atl = ema_constant(atl_days)

    def compute(
        self,
        daily_tss: Sequence[float],
        start_date: Optional[date] = None,
        initial_ctl: float = 0.0,
        initial_atl: float = 0.0,
    ) -> List[DailyTrainingLoad]:
        """Run the recurrence over consecutive days.

        ``daily_tss[i]`` belongs to ``start_date + i days``; rest days must be
        present as 0. Without a start date, records carry only their day
        offset. ``initial_ctl``/``initial_atl`` seed the state before the
        first day.
        """
        ctl, atl = float(initial_ctl), float(initial_atl)
        records: List[DailyTrainingLoad] = []
        for day, tss in enumerate(daily_tss):
            tss = float(tss)
            if tss < 0:
                raise ValueError(f"Daily TSS must be >= 0, got {tss} on day {day}")
            tsb = ctl - atl
            ctl = tss * self.k_ctl + ctl * (1.0 - self.k_ctl)
            atl = tss * self.k_atl + atl * (1.0 - self.k_atl)
            records.append(
                DailyTrainingLoad(
                    day=day,
                    date=start_date + timedelta(days=day) if start_date is not None else None,
                    tss=tss,
                    ctl=ctl,
                    atl=atl,
                    tsb=tsb,
                )
            )
        logger.debug(f"Computed training load for {len(records)} days")
        return records

    def compute_dated(
        self,
        daily: Sequence[Tuple[date, float]],
        initial_ctl: float = 0.0,
        initial_atl: float = 0.0,
    ) -> List[DailyTrainingLoad]:
        """Run the recurrence over ``(date, tss)`` rows that must be consecutive days."""
        if not daily:
            return []
        for (prev, _), (cur, _) in zip(daily, daily[1:]):
            if cur - prev != timedelta(days=1):
                raise ValueError(f"Daily TSS rows must be consecutive days, got {prev} followed by {cur}")
        return self.compute([tss for _, tss in daily], start_date=daily[0][0], initial_ctl=initial_ctl, initial_atl=initial_atl)

    def compute_range(
        self,
        tss_by_date: Mapping[date, float],
        start: date,
        end: date,
        initial_ctl: float = 0.0,
        initial_atl: float = 0.0,
    ) -> List[DailyTrainingLoad]:
        """Gap-fill ``tss_by_date`` over [start, end] and run the recurrence."""
        return self.compute_dated(fill_missing_days(tss_by_date, start, end), initial_ctl=initial_ctl, initial_atl=initial_atl)

    def seed(self, preceding_tss: Sequence[float], initial_ctl: float = 0.0, initial_atl: float = 0.0) -> Tuple[float, float]:
        """CTL/ATL after the days preceding a window, for use as the window's seed."""
        records = self.compute(preceding_tss, initial_ctl=initial_ctl, initial_atl=initial_atl)
        if not records:
            return float(initial_ctl), float(initial_atl)
        return records[-1].ctl, records[-1].atl


def compute_training_load(
    daily_tss: Sequence[float],
    start_date: Optional[date] = None,
    initial_ctl: float = 0.0,
    initial_atl: float = 0.0,
    ctl_days: int = CTL_DAYS,
    atl_days: int = ATL_DAYS,
) -> List[DailyTrainingLoad]:
    return TrainingLoadModel(ctl_days=ctl_days, atl_days=atl_days).compute(
        daily_tss, start_date=start_date, initial_ctl=initial_ctl, initial_atl=initial_atl
    )


def fill_missing_days(tss_by_date: Mapping[date, float], start: date, end: date) -> List[Tuple[date, float]]:
    """One ``(date, tss)`` row per calendar day in [start, end]; days without TSS get 0."""
    if end < start:
        raise ValueError(f"end ({end}) must not be before start ({start})")
    full_index = pd.date_range(start, end, freq="D")
    series = pd.Series({pd.Timestamp(d): float(v) for d, v in tss_by_date.items()}, dtype=float)
    series = series.groupby(level=0).sum().reindex(full_index, fill_value=0.0) if not series.empty else pd.Series(0.0, index=full_index)
    return [(ts.date(), float(v)) for ts, v in series.items()]


def activity_tss(activity: Activity, ftp_watts: Optional[float], window_s: int = NP_WINDOW_S) -> Optional[float]:
    """TSS of one activity, charged for ``Activity.charged_duration_s``."""
    watts = activity.streams.watts
    if watts is None or len(watts) == 0:
        return None
    return compute_power_metrics(watts, activity.charged_duration_s, ftp_watts, window_s=window_s).training_stress_score


def daily_tss_from_activities(
    activities: Iterable[Activity],
    ftp_watts: Optional[float],
    window_s: int = NP_WINDOW_S,
    include: Optional[ActivityFilter] = None,
) -> Dict[date, float]:
    """Sum of activity TSS per UTC calendar day over the activities ``include`` accepts.

    Empty when FTP is unset.
    """
    daily: Dict[date, float] = {}
    if ftp_watts is None or ftp_watts <= 0:
        logger.info("FTP not set; no TSS can be computed")
        return daily
    for activity in activities:
        if include is not None and not include(activity):
            continue
        tss = activity_tss(activity, ftp_watts, window_s=window_s)
        if tss is None:
            continue
        daily[activity.day] = daily.get(activity.day, 0.0) + tss
    return daily


def interpret_tsb(tsb: float) -> TsbInterpretation:
    """Form band for a TSB value, with a training recommendation for that band."""
    if tsb > 25:
        return TsbInterpretation(
            "very_fresh",
            "Very fresh - detraining risk",
            "Good for race or hard workout. Consider increasing training load.",
        )
    if tsb >= 5:
        return TsbInterpretation("optimal", "Optimal - rested and ready", "Excellent for high-intensity workouts or racing.")
    if tsb >= -10:
        return TsbInterpretation(
            "neutral", "Neutral - balanced training", "Continue normal training. Good for steady-state workouts."
        )
    if tsb >= -30:
        return TsbInterpretation(
            "fatigued", "Fatigued - building fitness", "Focus on base training. Avoid high-intensity efforts."
        )
    return TsbInterpretation(
        "very_fatigued", "Very fatigued - overreaching", "Consider rest or recovery week. Risk of overtraining."
    )


def ramp_rate(
    records: Sequence[DailyTrainingLoad],
    index: int = -1,
    unsafe_pct: float = RAMP_UNSAFE_PCT,
    loss_pct: float = RAMP_LOSS_PCT,
) -> RampRate:
    """Weekly CTL change in percent: (ctl[d] - ctl[d-7]) / ctl[d-7] * 100.

    Unavailable when day d-7 is outside the records or its CTL is 0.
    """
    if not records:
        return RampRate(percent_per_week=None, status=None)
    d = index if index >= 0 else len(records) + index
    if d < 0 or d >= len(records):
        raise IndexError(f"Record index {index} out of range for {len(records)} records")
    if d < 7 or records[d - 7].ctl == 0:
        return RampRate(percent_per_week=None, status=None)

    week_ago = records[d - 7].ctl
    pct = (records[d].ctl - week_ago) / week_ago * 100.0
    if pct > unsafe_pct:
        status = "unsafe"
    elif pct < loss_pct:
        status = "fitness_loss"
    else:
        status = "safe"
    return RampRate(percent_per_week=pct, status=status)


def current_state(records: Sequence[DailyTrainingLoad]) -> Optional[DailyTrainingLoad]:
    return records[-1] if records else None
