"""Aggregate statistics over an index sub-range of an activity's streams."""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import List, Optional, Sequence

import numpy as np

from ..config import MIN_PARTIAL_SPLIT_M, MIN_SELECTION_KM, SPLIT_DISTANCE_M
from ..models.types import RangeStats, SelectionRange, Split, StreamSet
from ..series.indexed import lower_bound

logger = logging.getLogger(__name__)


def selection_from_distance(
    distances: Optional[Sequence[float]],
    start_km: float,
    end_km: float,
    min_span_km: float = MIN_SELECTION_KM,
) -> Optional[SelectionRange]:
    """Map a distance window (either order) onto stream indices.

    Windows narrower than ``min_span_km`` are no selection.
    """
    if distances is None or len(distances) == 0:
        return None
    lo_km, hi_km = min(start_km, end_km), max(start_km, end_km)
    if hi_km - lo_km < min_span_km:
        return None
    start_index = lower_bound(distances, lo_km * 1000.0)
    end_index = lower_bound(distances, hi_km * 1000.0)
    return SelectionRange(start_index=min(start_index, end_index), end_index=max(start_index, end_index))


def signal_average(values: Optional[Sequence[float]], start: int, end: int) -> Optional[float]:
    """Mean of positive samples in values[start..end]; None when there are none."""
    if values is None or len(values) == 0 or start >= len(values):
        return None
    upper = min(end, len(values) - 1)
    window = np.asarray(values[start : upper + 1], dtype=float)
    window = window[window > 0]
    if window.size == 0:
        return None
    return float(window.mean())


def elevation_gain(altitudes: Optional[Sequence[float]], start: int, end: int) -> Optional[float]:
    """Sum of positive altitude deltas inside [start, end]; descents are not subtracted."""
    if altitudes is None or len(altitudes) == 0:
        return None
    upper = min(end, len(altitudes) - 1)
    if upper <= start:
        return 0.0
    deltas = np.diff(np.asarray(altitudes[start : upper + 1], dtype=float))
    return float(deltas[deltas > 0].sum())


def compute_range_stats(streams: StreamSet, selection: SelectionRange) -> Optional[RangeStats]:
    """Distance, duration, signal averages and climbing over a selection.

    Returns None when the activity has no distance or time stream. A
    degenerate selection (start == end) has zero distance and duration and
    every average unavailable.
    """
    n = streams.common_length("distance", "time")
    if n == 0:
        return None
    start, end = selection.start_index, selection.end_index
    if end >= n:
        raise ValueError(f"Selection end_index {end} is outside the common distance/time length {n}")

    d, t = streams.distance, streams.time
    distance_m = float(d[end] - d[start])
    duration_s = max(0.0, float(t[end] - t[start]))
    gain = elevation_gain(streams.altitude, start, end)

    if selection.is_degenerate:
        return RangeStats(
            start_index=start,
            end_index=end,
            distance_m=distance_m,
            duration_s=duration_s,
            average_speed_kmh=None,
            average_pace_s_per_km=None,
            average_heart_rate_bpm=None,
            average_power_w=None,
            average_cadence_rpm=None,
            elevation_gain_m=gain,
            vam_m_per_h=None,
        )

    speed = (distance_m / 1000.0) / (duration_s / 3600.0) if duration_s > 0 else None
    pace = duration_s / (distance_m / 1000.0) if distance_m > 0 and duration_s > 0 else None
    vam = gain / duration_s * 3600.0 if gain is not None and duration_s > 0 else None

    return RangeStats(
        start_index=start,
        end_index=end,
        distance_m=distance_m,
        duration_s=duration_s,
        average_speed_kmh=speed,
        average_pace_s_per_km=pace,
        average_heart_rate_bpm=signal_average(streams.heartrate, start, end),
        average_power_w=signal_average(streams.watts, start, end),
        average_cadence_rpm=signal_average(streams.cadence, start, end),
        elevation_gain_m=gain,
        vam_m_per_h=vam,
    )


def full_range(streams: StreamSet) -> Optional[SelectionRange]:
    n = streams.common_length("distance", "time")
    if n == 0:
        return None
    return SelectionRange(start_index=0, end_index=n - 1)


def compute_splits(
    distances: Optional[Sequence[float]],
    times: Optional[Sequence[float]],
    heartrate: Optional[Sequence[float]] = None,
    split_m: float = SPLIT_DISTANCE_M,
    min_partial_m: float = MIN_PARTIAL_SPLIT_M,
) -> List[Split]:
    """Fixed-distance splits with pace and average heart rate.

    A trailing partial split is added when the distance left after the last
    full split exceeds ``min_partial_m``; its pace is normalised per km.
    """
    if split_m <= 0:
        raise ValueError(f"split_m must be > 0, got {split_m}")
    if distances is None or times is None:
        return []
    n = min(len(distances), len(times))
    if n < 2:
        return []

    total = float(distances[n - 1])
    splits: List[Split] = []
    last = 0
    number = 1
    while number * split_m <= total:
        idx = bisect_left(distances, number * split_m, last + 1, n)
        if idx >= n:
            break
        split_time = float(times[idx] - times[last])
        splits.append(
            Split(
                split_number=number,
                distance_m=split_m,
                time_s=split_time,
                pace_s_per_km=split_time / (split_m / 1000.0),
                average_heart_rate_bpm=signal_average(heartrate, last, idx),
            )
        )
        last = idx
        number += 1

    remaining = total - len(splits) * split_m
    if remaining > min_partial_m and last < n - 1:
        split_time = float(times[n - 1] - times[last])
        splits.append(
            Split(
                split_number=len(splits) + remaining / split_m,
                distance_m=remaining,
                time_s=split_time,
                pace_s_per_km=split_time / (remaining / 1000.0),
                average_heart_rate_bpm=signal_average(heartrate, last, n - 1),
                is_partial=True,
            )
        )
    logger.debug(f"Computed {len(splits)} splits over {total:.0f} m")
    return splits


def best_split(splits: List[Split]) -> Optional[Split]:
    """Fastest full split; the earliest wins ties."""
    best: Optional[Split] = None
    for split in splits:
        if split.is_partial:
            continue
        if best is None or split.pace_s_per_km < best.pace_s_per_km:
            best = split
    return best
