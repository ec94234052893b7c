from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import RIDER_TYPE_LABELS, STRENGTH_BENCHMARKS, STRENGTH_TIE_EPSILON, STRENGTH_TIE_ORDER
from ..models.types import PowerCurveEntry, RiderProfile
from .curve import best_watts

logger = logging.getLogger(__name__)


def strength_score(best_w: Optional[float], weight_kg: Optional[float], benchmark_wkg: float) -> Optional[float]:
    """min(100, 100 * athlete W/kg / benchmark W/kg); None without power or weight."""
    if best_w is None or weight_kg is None or weight_kg <= 0 or benchmark_wkg <= 0:
        return None
    return float(min(100.0, 100.0 * (best_w / weight_kg) / benchmark_wkg))


def dominant_strength(
    strengths: Mapping[str, Optional[float]],
    tie_order: Sequence[str] = STRENGTH_TIE_ORDER,
    tie_epsilon: float = STRENGTH_TIE_EPSILON,
) -> Optional[str]:
    """Dimension with the highest score.

    Every dimension within ``tie_epsilon`` of the maximum is a candidate and
    the first candidate in ``tie_order`` wins.
    """
    scored = {k: v for k, v in strengths.items() if v is not None}
    if not scored:
        return None
    top = max(scored.values())
    candidates = [k for k, v in scored.items() if top - v <= tie_epsilon]
    ranked = [k for k in tie_order if k in candidates]
    # dimensions outside the tie order rank after it, alphabetically
    ranked.extend(sorted(k for k in candidates if k not in tie_order))
    return ranked[0]


def classify_rider(
    curve: List[PowerCurveEntry],
    weight_kg: Optional[float],
    benchmarks: Mapping[str, Tuple[int, float]] = STRENGTH_BENCHMARKS,
    tie_order: Sequence[str] = STRENGTH_TIE_ORDER,
    tie_epsilon: float = STRENGTH_TIE_EPSILON,
    labels: Mapping[str, str] = RIDER_TYPE_LABELS,
) -> RiderProfile:
    """Score each strength dimension against its benchmark and label the rider type.

    Dimensions whose benchmark duration is missing from the curve, or every
    dimension when weight is unset, score None; the rider type is None when
    nothing could be scored.
    """
    strengths: Dict[str, Optional[float]] = {}
    key_powers: Dict[str, Optional[float]] = {}
    for dimension, (seconds, benchmark_wkg) in benchmarks.items():
        watts = best_watts(curve, seconds)
        key_powers[dimension] = watts
        strengths[dimension] = strength_score(watts, weight_kg, benchmark_wkg)

    dominant = dominant_strength(strengths, tie_order=tie_order, tie_epsilon=tie_epsilon)
    rider_type = labels.get(dominant, dominant) if dominant is not None else None
    if rider_type is None:
        logger.debug("No strength dimension could be scored; rider type unavailable")
    return RiderProfile(strengths=strengths, rider_type=rider_type, key_powers_w=key_powers, weight_kg=weight_kg)
