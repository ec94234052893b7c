"""Best-average power over a duration ladder, within one activity and across many.

The same routine serves both levels: an activity's curve is the sliding-window
maximum of its power stream, and a cross-activity curve is the per-duration
maximum over the curves of whichever activities the caller includes.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DURATION_LADDER
from ..models.types import Activity, PowerCurveEntry

logger = logging.getLogger(__name__)

Ladder = Sequence[Tuple[int, str]]
ActivityFilter = Callable[[Activity], bool]

# Efforts closer than this fraction of their magnitude count as equal
TIE_RELATIVE_TOLERANCE = 1e-9

# Types that also cover their indoor/virtual variants
VIRTUAL_VARIANTS: Dict[str, Tuple[str, ...]] = {
    "Ride": ("VirtualRide",),
    "Run": ("VirtualRun",),
}


def best_efforts(power: Optional[Sequence[float]], durations: Iterable[int]) -> Dict[int, Tuple[float, int]]:
    """Maximum rolling-average power per duration, with the window's start index.

    Durations longer than the stream are left out. Ties resolve to the first
    window reaching the maximum.
    """
    if power is None or len(power) == 0:
        return {}
    p = np.nan_to_num(np.asarray(power, dtype=float), nan=0.0)
    n = len(p)
    cs = np.concatenate(([0.0], np.cumsum(p)))

    efforts: Dict[int, Tuple[float, int]] = {}
    for d in durations:
        if d <= 0:
            raise ValueError(f"Durations must be > 0, got {d}")
        if d > n:
            continue
        sums = cs[d:] - cs[: n + 1 - d]
        top = sums.max()
        # cumsum differences of equal windows can differ in the last bits
        start = int(np.flatnonzero(sums >= top - _tie_tolerance(top))[0])
        efforts[d] = (float(sums[start] / d), start)
    return efforts


def _tie_tolerance(value: float) -> float:
    return TIE_RELATIVE_TOLERANCE * max(1.0, abs(float(value)))


def activity_power_curve(
    power: Optional[Sequence[float]],
    durations: Ladder = DURATION_LADDER,
    activity: Optional[Activity] = None,
) -> List[PowerCurveEntry]:
    """Power curve of one stream, tagged with ``activity`` when given."""
    efforts = best_efforts(power, [seconds for seconds, _ in durations])
    entries = []
    for seconds, label in durations:
        if seconds not in efforts:
            continue
        entries.append(
            PowerCurveEntry(
                duration_label=label,
                duration_seconds=seconds,
                watts=efforts[seconds][0],
                activity_id=activity.activity_id if activity is not None else None,
                activity_date=activity.day if activity is not None else None,
            )
        )
    return entries


def _ordered(activities: Iterable[Activity]) -> List[Activity]:
    # earliest activity wins equal efforts
    return sorted(activities, key=lambda a: (a.start_date, a.activity_id))


def merge_curves(curves: Iterable[List[PowerCurveEntry]], durations: Ladder = DURATION_LADDER) -> List[PowerCurveEntry]:
    """Per-duration maximum across curves, keeping the provenance of the winner."""
    best: Dict[int, PowerCurveEntry] = {}
    for curve in curves:
        for entry in curve:
            current = best.get(entry.duration_seconds)
            if current is None or entry.watts > current.watts + _tie_tolerance(current.watts):
                best[entry.duration_seconds] = entry
    return [best[seconds] for seconds, _ in durations if seconds in best]


def power_curve(
    activities: Iterable[Activity],
    durations: Ladder = DURATION_LADDER,
    include: Optional[ActivityFilter] = None,
) -> List[PowerCurveEntry]:
    """Best power per duration over the activities ``include`` accepts (all by default)."""
    scope = [a for a in _ordered(activities) if include is None or include(a)]
    curves = [activity_power_curve(a.streams.watts, durations, activity=a) for a in scope]
    logger.debug(f"Power curve over {len(scope)} activities")
    return merge_curves(curves, durations)


def power_curves_by_year(
    activities: Iterable[Activity],
    durations: Ladder = DURATION_LADDER,
    include: Optional[ActivityFilter] = None,
) -> Tuple[List[PowerCurveEntry], Dict[int, List[PowerCurveEntry]]]:
    """All-time curve plus one curve per calendar year.

    Each activity's curve is computed once and merged at both levels, so a
    yearly best can never exceed the all-time best for the same duration.
    """
    scope = [a for a in _ordered(activities) if include is None or include(a)]
    per_activity = [(a, activity_power_curve(a.streams.watts, durations, activity=a)) for a in scope]

    by_year: Dict[int, List[List[PowerCurveEntry]]] = {}
    for activity, curve in per_activity:
        by_year.setdefault(activity.day.year, []).append(curve)

    all_time = merge_curves((curve for _, curve in per_activity), durations)
    yearly = {year: merge_curves(curves, durations) for year, curves in sorted(by_year.items())}
    return all_time, yearly


def in_year(year: int) -> ActivityFilter:
    return lambda activity: activity.day.year == year


def of_types(*activity_types: str) -> ActivityFilter:
    wanted = set(activity_types)
    return lambda activity: activity.activity_type in wanted


def of_sport(*activity_types: str) -> ActivityFilter:
    """Like ``of_types``, but a base type also matches its virtual variant."""
    wanted = set(activity_types)
    for activity_type in activity_types:
        wanted.update(VIRTUAL_VARIANTS.get(activity_type, ()))
    return lambda activity: activity.activity_type in wanted


def between(start: date, end: date) -> ActivityFilter:
    return lambda activity: start <= activity.day <= end


def best_watts(curve: List[PowerCurveEntry], duration_seconds: int) -> Optional[float]:
    for entry in curve:
        if entry.duration_seconds == duration_seconds:
            return entry.watts
    return None
