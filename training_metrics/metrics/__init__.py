"""Per-activity and cross-activity metric calculations."""

from .activity import ActivityMetricsCalculator, calculate_activity_metrics
from .climbing import calculate_vam, find_climbs
from .curve import (
    activity_power_curve,
    best_efforts,
    best_watts,
    between,
    in_year,
    merge_curves,
    of_sport,
    of_types,
    power_curve,
    power_curves_by_year,
)
from .power import (
    compute_power_metrics,
    intensity_factor,
    normalized_power_w,
    training_stress_score,
    variability_index,
)
from .profile import classify_rider, dominant_strength, strength_score
from .range_stats import (
    best_split,
    compute_range_stats,
    compute_splits,
    elevation_gain,
    full_range,
    selection_from_distance,
    signal_average,
)

__all__ = [
    "ActivityMetricsCalculator",
    "activity_power_curve",
    "best_efforts",
    "best_split",
    "best_watts",
    "between",
    "calculate_activity_metrics",
    "calculate_vam",
    "classify_rider",
    "compute_power_metrics",
    "compute_range_stats",
    "compute_splits",
    "dominant_strength",
    "elevation_gain",
    "find_climbs",
    "full_range",
    "in_year",
    "intensity_factor",
    "merge_curves",
    "normalized_power_w",
    "of_sport",
    "of_types",
    "power_curve",
    "power_curves_by_year",
    "selection_from_distance",
    "signal_average",
    "strength_score",
    "training_stress_score",
    "variability_index",
]
