from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import CLIMB_DESCENT_TOLERANCE_M, MIN_CLIMB_HEIGHT_M
from ..models.types import ClimbSegment, VamResult

logger = logging.getLogger(__name__)


def find_climbs(
    altitudes: Sequence[float],
    times: Sequence[float],
    min_climb_height_m: float = MIN_CLIMB_HEIGHT_M,
    descent_tolerance_m: float = CLIMB_DESCENT_TOLERANCE_M,
) -> List[ClimbSegment]:
    """Climbing segments of at least ``min_climb_height_m``.

    A climb opens where the next sample is higher and closes at the end of
    the data, or where the profile turns down after climbing more than
    ``descent_tolerance_m`` above the lowest point seen since it opened.
    Its gain is the end altitude minus the start altitude.
    """
    n = len(altitudes)
    segments: List[ClimbSegment] = []
    start: Optional[int] = None
    start_altitude = 0.0
    lowest = 0.0

    for i in range(n):
        altitude = float(altitudes[i])
        if start is None:
            if i < n - 1 and altitudes[i + 1] > altitude:
                start = i
                start_altitude = altitude
                lowest = altitude
            continue

        lowest = min(lowest, altitude)
        at_end = i == n - 1
        turning_down = i < n - 1 and altitudes[i + 1] < altitude
        if at_end or (turning_down and altitude - lowest > descent_tolerance_m):
            gain = altitude - start_altitude
            duration = float(times[i] - times[start])
            if gain >= min_climb_height_m and duration > 0:
                segments.append(ClimbSegment(start_index=start, end_index=i, elevation_gain_m=gain, duration_s=duration))
            start = None
    return segments


def calculate_vam(
    altitudes: Optional[Sequence[float]],
    times: Optional[Sequence[float]],
    min_climb_height_m: float = MIN_CLIMB_HEIGHT_M,
    descent_tolerance_m: float = CLIMB_DESCENT_TOLERANCE_M,
) -> Optional[VamResult]:
    """VAM (metres climbed per hour) over the time spent on significant climbs.

    None without altitude or time data; the streams must be the same length.
    """
    if altitudes is None or times is None or len(altitudes) == 0 or len(times) == 0:
        return None
    if len(altitudes) != len(times):
        raise ValueError(f"Altitude and time streams differ in length ({len(altitudes)} vs {len(times)})")

    segments = find_climbs(altitudes, times, min_climb_height_m, descent_tolerance_m)
    total_gain = sum(s.elevation_gain_m for s in segments)
    total_time = sum(s.duration_s for s in segments)
    vam = total_gain * 3600.0 / total_time if total_time > 0 else None
    logger.debug(f"Found {len(segments)} climbs, {total_gain:.0f} m in {total_time:.0f} s")
    return VamResult(
        vam_m_per_h=vam,
        total_climbing_time_s=total_time,
        total_elevation_gain_m=total_gain,
        climb_segments=segments,
    )
