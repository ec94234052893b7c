from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import COGGAN_POWER_ZONES, HEART_RATE_BANDS, MAX_HR_ZONES
from ..models.types import ZoneBand, ZoneBucket

logger = logging.getLogger(__name__)


def _bands_from_table(table: Sequence[Tuple[str, float, str]], scale: float = 1.0) -> List[ZoneBand]:
    return [ZoneBand(label=label, lower_bound=lower * scale, color=color) for label, lower, color in table]


def power_zone_bands(ftp_watts: Optional[float], model: Sequence[Tuple[str, float, str]] = COGGAN_POWER_ZONES) -> Optional[List[ZoneBand]]:
    """Power bands in watts for an FTP-relative zone model; None when FTP is unset."""
    if ftp_watts is None or ftp_watts <= 0:
        return None
    return _bands_from_table(model, scale=float(ftp_watts))


def heart_rate_bands(table: Sequence[Tuple[str, float, str]] = HEART_RATE_BANDS) -> List[ZoneBand]:
    """Fixed bpm bands."""
    return _bands_from_table(table)


def max_hr_zone_bands(max_hr_bpm: Optional[float], model: Sequence[Tuple[str, float, str]] = MAX_HR_ZONES) -> Optional[List[ZoneBand]]:
    """Heart-rate zones as fractions of max heart rate; None when max HR is unset."""
    if max_hr_bpm is None or max_hr_bpm <= 0:
        return None
    return _bands_from_table(model, scale=float(max_hr_bpm))


def validate_bands(bands: Sequence[ZoneBand]) -> None:
    if not bands:
        raise ValueError("At least one zone band is required")
    lowers = [b.lower_bound for b in bands]
    for prev, nxt in zip(lowers, lowers[1:]):
        if nxt <= prev:
            raise ValueError(f"Zone band lower bounds must be strictly ascending, got {lowers}")


def sample_weights(n: int, times: Optional[Sequence[float]]) -> np.ndarray:
    """Seconds each sample stands for.

    With a time stream of the same length, a sample weighs the gap to the
    next sample (the previous gap for the last one), at least 1 s. Otherwise
    every sample weighs 1.
    """
    if times is None or len(times) != n or n < 2:
        if times is not None and len(times) != n:
            logger.debug(f"Time stream length {len(times)} != {n}; weighting by sample count")
        return np.ones(n, dtype=float)
    t = np.asarray(times, dtype=float)
    gaps = np.diff(t)
    weights = np.empty(n, dtype=float)
    weights[:-1] = gaps
    weights[-1] = gaps[-1]
    return np.maximum(1.0, weights)


def bucket_stream(
    values: Optional[Sequence[float]],
    bands: Sequence[ZoneBand],
    times: Optional[Sequence[float]] = None,
) -> List[ZoneBucket]:
    """Time-weighted distribution of a stream across ordered zone bands.

    Only samples with a positive value count. A sample falls in the last band
    whose lower bound it reaches; the final band is open-ended. Returns an
    empty list when no signal-bearing time was accumulated.
    """
    validate_bands(bands)
    if values is None or len(values) == 0:
        return []

    v = np.asarray(values, dtype=float)
    weights = sample_weights(len(v), times)
    signal = v > 0  # NaN compares False
    if not signal.any():
        return []

    lowers = np.array([b.lower_bound for b in bands], dtype=float)
    idx = np.clip(np.searchsorted(lowers, v[signal], side="right") - 1, 0, len(bands) - 1)
    seconds = np.bincount(idx, weights=weights[signal], minlength=len(bands))

    total = float(seconds.sum())
    if total <= 0:
        return []

    return [
        ZoneBucket(
            zone_index=i,
            label=band.label,
            seconds=float(seconds[i]),
            percent=float(seconds[i] / total * 100.0),
            color=band.color,
        )
        for i, band in enumerate(bands)
    ]


def total_signal_seconds(values: Optional[Sequence[float]], times: Optional[Sequence[float]] = None) -> float:
    """Weighted seconds carried by signal-bearing samples."""
    if values is None or len(values) == 0:
        return 0.0
    v = np.asarray(values, dtype=float)
    weights = sample_weights(len(v), times)
    return float(weights[v > 0].sum())
