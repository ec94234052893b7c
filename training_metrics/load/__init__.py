from .insights import (
    impact_from_tss,
    insights_for_activity,
    pmc_deltas,
    relative_impact,
    training_insights,
    zone_from_intensity,
)
from .pmc import (
    TrainingLoadModel,
    activity_tss,
    compute_training_load,
    current_state,
    daily_tss_from_activities,
    fill_missing_days,
    interpret_tsb,
    ramp_rate,
)

__all__ = [
    "TrainingLoadModel",
    "activity_tss",
    "compute_training_load",
    "current_state",
    "daily_tss_from_activities",
    "fill_missing_days",
    "impact_from_tss",
    "insights_for_activity",
    "interpret_tsb",
    "pmc_deltas",
    "ramp_rate",
    "relative_impact",
    "training_insights",
    "zone_from_intensity",
]
