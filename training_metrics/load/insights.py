"""Session insights: intensity zone, load impact and PMC change for one activity."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Sequence, Tuple

from ..models.types import DailyTrainingLoad, TrainingInsights

# (upper bound exclusive, key); the last band catches everything above
IF_ZONES: Tuple[Tuple[float, str], ...] = (
    (0.55, "Z1 Recovery"),
    (0.76, "Z2 Endurance"),
    (0.91, "Z3 Tempo"),
    (1.06, "Z4 Threshold"),
    (1.21, "Z5 VO2 Max"),
    (math.inf, "Z6 Anaerobic"),
)

TSS_IMPACT: Tuple[Tuple[float, str], ...] = (
    (25, "recovery"),
    (50, "light"),
    (80, "moderate"),
    (110, "build"),
    (140, "high"),
    (170, "very_high"),
    (math.inf, "extreme"),
)

RELATIVE_IMPACT: Tuple[Tuple[float, str], ...] = (
    (0.5, "low"),
    (0.9, "normal"),
    (1.2, "strong"),
    (1.5, "very_strong"),
    (math.inf, "massive"),
)


def _band(value: float, bands: Tuple[Tuple[float, str], ...]) -> str:
    for upper, key in bands:
        if value < upper:
            return key
    return bands[-1][1]


def zone_from_intensity(intensity_factor: float) -> str:
    return _band(intensity_factor, IF_ZONES)


def impact_from_tss(tss: float) -> str:
    return _band(tss, TSS_IMPACT)


def relative_impact(tss: float, ctl: Optional[float]) -> Tuple[Optional[str], Optional[float]]:
    """Band for the session's TSS as a share of current fitness (CTL)."""
    if ctl is None or ctl <= 0:
        return None, None
    ratio = tss / ctl
    return _band(ratio, RELATIVE_IMPACT), ratio


def pmc_deltas(
    records: Sequence[DailyTrainingLoad], on_date: date
) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    """Day-over-day CTL, ATL and TSB change on ``on_date``.

    All three are None when the date or the day before it is not in the records.
    """
    for i, record in enumerate(records):
        if record.date == on_date:
            if i == 0:
                break
            prev = records[i - 1]
            return record.ctl - prev.ctl, record.atl - prev.atl, record.tsb - prev.tsb
    return None, None, None


def _signed(value: Optional[float]) -> Optional[str]:
    if value is None or not math.isfinite(value):
        return None
    return f"{value:+.1f}"


def training_insights(
    tss: Optional[float],
    intensity_factor: Optional[float],
    ctl: Optional[float] = None,
    ctl_delta: Optional[float] = None,
    atl_delta: Optional[float] = None,
    tsb_delta: Optional[float] = None,
) -> TrainingInsights:
    """Classify one session.

    Without a positive TSS and IF the result is ``insufficient`` and carries
    no bands. Relative impact needs a positive CTL.
    """
    if (
        tss is None
        or intensity_factor is None
        or not math.isfinite(tss)
        or not math.isfinite(intensity_factor)
        or tss <= 0
        or intensity_factor <= 0
    ):
        return TrainingInsights(state="insufficient")

    zone = zone_from_intensity(intensity_factor)
    impact = impact_from_tss(tss)
    relative, ratio = relative_impact(tss, ctl)

    parts = [zone, impact.replace("_", " ")]
    if relative is not None:
        parts.append(f"{relative.replace('_', ' ')} ({round(ratio * 100)}% of CTL)")
    deltas = [
        f"{name} {text}"
        for name, text in (("CTL", _signed(ctl_delta)), ("ATL", _signed(atl_delta)), ("TSB", _signed(tsb_delta)))
        if text is not None
    ]
    if deltas:
        parts.append(", ".join(deltas))

    return TrainingInsights(
        state="ok",
        zone=zone,
        impact=impact,
        relative_impact=relative,
        relative_ratio=ratio,
        ctl_delta=ctl_delta,
        atl_delta=atl_delta,
        tsb_delta=tsb_delta,
        summary=" | ".join(parts),
    )


def insights_for_activity(
    tss: Optional[float],
    intensity_factor: Optional[float],
    records: Sequence[DailyTrainingLoad],
    on_date: date,
) -> TrainingInsights:
    """Insights with CTL and PMC deltas taken from the record of ``on_date``."""
    ctl = next((r.ctl for r in records if r.date == on_date), None)
    ctl_delta, atl_delta, tsb_delta = pmc_deltas(records, on_date)
    return training_insights(tss, intensity_factor, ctl=ctl, ctl_delta=ctl_delta, atl_delta=atl_delta, tsb_delta=tsb_delta)
