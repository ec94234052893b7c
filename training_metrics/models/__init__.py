"""Typed domain objects for streams, derived metrics and athlete settings."""

from .athlete_profile import AthleteProfile, load_athlete_profile, save_athlete_profile
from .types import (
    Activity,
    ActivitySummary,
    ClimbSegment,
    DailyTrainingLoad,
    PowerCurveEntry,
    PowerMetrics,
    RampRate,
    RangeStats,
    ResampledPoint,
    RiderProfile,
    SelectionRange,
    Split,
    StreamSet,
    TrainingInsights,
    TsbInterpretation,
    VamResult,
    ZoneBand,
    ZoneBucket,
)

__all__ = [
    "Activity",
    "ActivitySummary",
    "AthleteProfile",
    "ClimbSegment",
    "DailyTrainingLoad",
    "PowerCurveEntry",
    "PowerMetrics",
    "RampRate",
    "RangeStats",
    "ResampledPoint",
    "RiderProfile",
    "SelectionRange",
    "Split",
    "StreamSet",
    "TrainingInsights",
    "TsbInterpretation",
    "VamResult",
    "ZoneBand",
    "ZoneBucket",
    "load_athlete_profile",
    "save_athlete_profile",
]
