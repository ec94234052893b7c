"""Resampling of irregular activity streams for charting and analysis."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import MAX_CHART_POINTS, RESAMPLE_INTERVAL_M
from ..models.types import ResampledPoint, SelectionRange
from .indexed import bracket

logger = logging.getLogger(__name__)


def _truncated(values: Optional[Sequence[float]], distances: Optional[Sequence[float]]) -> int:
    if values is None or distances is None:
        return 0
    n = min(len(values), len(distances))
    if len(values) != len(distances):
        logger.warning(f"Stream length mismatch ({len(values)} values, {len(distances)} distances); truncating to {n}")
    return n


def resample_at_interval(
    values: Optional[Sequence[float]],
    distances: Optional[Sequence[float]],
    interval_m: float = RESAMPLE_INTERVAL_M,
) -> List[ResampledPoint]:
    """Resample ``values`` every ``interval_m`` metres along the distance axis.

    Intermediate points are linearly interpolated between the two raw samples
    bracketing the target distance and carry the lower bracket's index. The
    first and last raw samples are always emitted verbatim.
    """
    if interval_m <= 0:
        raise ValueError(f"interval_m must be > 0, got {interval_m}")
    n = _truncated(values, distances)
    if n == 0:
        return []

    last = n - 1
    total_distance = float(distances[last])
    result = [ResampledPoint(distance_km=float(distances[0]) / 1000.0, value=float(values[0]), stream_index=0)]

    first_distance = float(distances[0])
    k = int(first_distance // interval_m) + 1 if first_distance > 0 else 1
    while n > 1:
        target = k * interval_m
        k += 1
        if target >= total_distance:
            break
        if target <= first_distance:
            continue
        # target < distances[last], so the bracket stays inside the truncated range
        lower = bracket(distances, target)
        d1, d2 = float(distances[lower]), float(distances[lower + 1])
        v1, v2 = float(values[lower]), float(values[lower + 1])
        fraction = (target - d1) / (d2 - d1) if d2 > d1 else 0.0
        result.append(ResampledPoint(distance_km=target / 1000.0, value=v1 + (v2 - v1) * fraction, stream_index=lower))

    if last > 0:
        result.append(ResampledPoint(distance_km=total_distance / 1000.0, value=float(values[last]), stream_index=last))
    logger.debug(f"Resampled {n} samples at {interval_m} m into {len(result)} points")
    return result


def sample_range(
    values: Optional[Sequence[float]],
    distances: Optional[Sequence[float]],
    selection: Optional[SelectionRange] = None,
    max_points: int = MAX_CHART_POINTS,
) -> List[ResampledPoint]:
    """Stride through raw samples so a range yields roughly ``max_points`` points.

    No interpolation: every ``step``-th raw sample is emitted, with
    ``step = max(1, range_length // max_points)``, and the final sample of the
    range is appended when the stride skipped past it.
    """
    if max_points <= 0:
        raise ValueError(f"max_points must be > 0, got {max_points}")
    n = _truncated(values, distances)
    if n == 0:
        return []

    start, end = 0, n - 1
    if selection is not None:
        start = max(0, min(selection.start_index, n - 1))
        end = max(start, min(selection.end_index, n - 1))

    step = max(1, (end - start + 1) // max_points)
    result = [
        ResampledPoint(distance_km=float(distances[i]) / 1000.0, value=float(values[i]), stream_index=i)
        for i in range(start, end + 1, step)
    ]
    if result[-1].stream_index != end:
        result.append(ResampledPoint(distance_km=float(distances[end]) / 1000.0, value=float(values[end]), stream_index=end))
    return result


def derive_speed_kmh(distances: Optional[Sequence[float]], times: Optional[Sequence[float]]) -> Optional[np.ndarray]:
    """Per-sample speed in km/h from distance and time deltas.

    Samples with a non-positive time delta or a negative distance delta
    repeat the previous speed; sample 0 copies sample 1. Returns None when
    fewer than two aligned samples exist.
    """
    if distances is None or times is None:
        return None
    n = min(len(distances), len(times))
    if n < 2:
        return None
    d = np.asarray(distances[:n], dtype=float)
    t = np.asarray(times[:n], dtype=float)
    speeds = np.zeros(n, dtype=float)
    for i in range(1, n):
        dd = d[i] - d[i - 1]
        dt = t[i] - t[i - 1]
        if dt > 0 and dd >= 0:
            speeds[i] = (dd / 1000.0) / (dt / 3600.0)
        else:
            speeds[i] = speeds[i - 1]
    speeds[0] = speeds[1]
    return speeds
