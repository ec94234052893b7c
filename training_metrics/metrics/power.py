from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from ..config import NP_WINDOW_S
from ..models.types import PowerMetrics

logger = logging.getLogger(__name__)


def power_series(power: Optional[Sequence[float]]) -> pd.Series:
    """Power stream as a float Series; missing samples count as 0 W."""
    if power is None:
        return pd.Series([], dtype=float)
    return pd.Series(np.asarray(power, dtype=float)).fillna(0.0)


def normalized_power_w(power: Optional[Sequence[float]], window_s: int = NP_WINDOW_S) -> Optional[float]:
    """Normalized Power using a fixed-sample rolling average of ``window_s`` samples.

    - Assumes ~1 Hz sampling; the window is a sample count, not time-weighted.
    - Requires one full window. Shorter streams have no NP (None), there is
      no fallback to mean power.
    """
    if window_s <= 0:
        raise ValueError(f"window_s must be > 0, got {window_s}")
    ps = power_series(power)
    if len(ps) < window_s:
        return None
    rolling = ps.rolling(window=window_s, min_periods=window_s).mean().dropna()
    if rolling.empty:
        return None
    mean_fourth = rolling.pow(4).mean()
    return float(np.power(mean_fourth, 1.0 / 4.0))


def intensity_factor(np_w: Optional[float], ftp_watts: Optional[float]) -> Optional[float]:
    if np_w is None or ftp_watts is None or ftp_watts <= 0:
        return None
    return float(np_w / ftp_watts)


def training_stress_score(
    duration_s: float,
    np_w: Optional[float],
    intensity: Optional[float],
    ftp_watts: Optional[float],
) -> Optional[float]:
    """TSS = (seconds * NP * IF) / (FTP * 3600) * 100."""
    if duration_s < 0:
        raise ValueError(f"duration_s must be >= 0, got {duration_s}")
    if np_w is None or intensity is None or ftp_watts is None or ftp_watts <= 0:
        return None
    return float((duration_s * np_w * intensity) / (ftp_watts * 3600.0) * 100.0)


def variability_index(np_w: Optional[float], average_power_w: Optional[float]) -> Optional[float]:
    if np_w is None or average_power_w is None or average_power_w <= 0:
        return None
    return float(np_w / average_power_w)


def compute_power_metrics(
    power: Optional[Sequence[float]],
    duration_s: float,
    ftp_watts: Optional[float],
    window_s: int = NP_WINDOW_S,
) -> PowerMetrics:
    """All power-derived metrics for one activity.

    ``duration_s`` is the duration TSS is charged for (moving time for whole
    activities). Average power includes zero samples so that VI compares NP
    with the plain mean over the same samples.
    """
    if duration_s < 0:
        raise ValueError(f"duration_s must be >= 0, got {duration_s}")
    ps = power_series(power)
    if ps.empty:
        return PowerMetrics(
            duration_s=duration_s,
            average_power_w=None,
            max_power_w=None,
            normalized_power_w=None,
            intensity_factor=None,
            training_stress_score=None,
            variability_index=None,
            work_kj=None,
        )

    avg_power = float(ps.mean())
    npw = normalized_power_w(ps.to_numpy(), window_s=window_s)
    intensity = intensity_factor(npw, ftp_watts)
    tss = training_stress_score(duration_s, npw, intensity, ftp_watts)
    if npw is None:
        logger.debug(f"Power stream of {len(ps)} samples is shorter than the {window_s}-sample NP window")

    return PowerMetrics(
        duration_s=duration_s,
        average_power_w=avg_power,
        max_power_w=float(ps.max()),
        normalized_power_w=npw,
        intensity_factor=intensity,
        training_stress_score=tss,
        variability_index=variability_index(npw, avg_power),
        # Assume 1-second sampling
        work_kj=float(ps.sum() / 1000.0),
    )
