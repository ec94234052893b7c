from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence, Tuple


@dataclass
class StreamSet:
    """Raw per-tick streams for one activity.

    Streams share a sample index but may differ in length; indexed access must
    stay below ``common_length`` of the streams involved.
    """
    distance: Optional[Sequence[float]] = None  # m, non-decreasing
    time: Optional[Sequence[float]] = None  # s since start, non-decreasing
    altitude: Optional[Sequence[float]] = None  # m
    heartrate: Optional[Sequence[float]] = None  # bpm
    watts: Optional[Sequence[float]] = None  # W
    cadence: Optional[Sequence[float]] = None  # rpm
    latlng: Optional[Sequence[Tuple[float, float]]] = None

    def common_length(self, *names: str) -> int:
        lengths = []
        for name in names:
            values = getattr(self, name)
            lengths.append(len(values) if values is not None else 0)
        return min(lengths) if lengths else 0


@dataclass
class Activity:
    activity_id: int
    start_date: datetime
    streams: StreamSet = field(default_factory=StreamSet)
    activity_type: Optional[str] = None  # e.g. "Ride", "VirtualRide", "Run"
    moving_time_s: Optional[float] = None
    elapsed_time_s: Optional[float] = None
    distance_m: Optional[float] = None
    average_speed_mps: Optional[float] = None
    max_speed_mps: Optional[float] = None
    total_elevation_gain_m: Optional[float] = None

    @property
    def day(self) -> date:
        """UTC calendar day of the start; naive datetimes are taken as UTC."""
        start = self.start_date
        if isinstance(start, datetime):
            if start.tzinfo is not None:
                start = start.astimezone(timezone.utc)
            return start.date()
        return start

    @property
    def charged_duration_s(self) -> float:
        """Seconds TSS is charged for: moving time, else elapsed time, else one per power sample."""
        if self.moving_time_s is not None:
            return float(self.moving_time_s)
        if self.elapsed_time_s is not None:
            return float(self.elapsed_time_s)
        watts = self.streams.watts
        return float(len(watts)) if watts is not None else 0.0


@dataclass
class SelectionRange:
    start_index: int
    end_index: int

    def __post_init__(self) -> None:
        if self.start_index < 0:
            raise ValueError(f"start_index must be >= 0, got {self.start_index}")
        if self.start_index > self.end_index:
            raise ValueError(f"start_index ({self.start_index}) must be <= end_index ({self.end_index})")

    @property
    def is_degenerate(self) -> bool:
        return self.start_index == self.end_index


@dataclass
class ResampledPoint:
    distance_km: float
    value: float
    stream_index: int


@dataclass
class ZoneBand:
    """One band of a zone model; the band covers [lower_bound, next band's lower_bound)."""
    label: str
    lower_bound: float
    color: Optional[str] = None


@dataclass
class ZoneBucket:
    zone_index: int  # 0-based position in the band list
    label: str
    seconds: float
    percent: float
    color: Optional[str] = None


@dataclass
class PowerMetrics:
    duration_s: float
    average_power_w: Optional[float]
    max_power_w: Optional[float]
    normalized_power_w: Optional[float]
    intensity_factor: Optional[float]
    training_stress_score: Optional[float]
    variability_index: Optional[float]
    work_kj: Optional[float]


@dataclass
class PowerCurveEntry:
    duration_label: str
    duration_seconds: int
    watts: float
    activity_id: Optional[int] = None
    activity_date: Optional[date] = None


@dataclass
class RiderProfile:
    strengths: dict  # dimension -> score (0-100) or None
    rider_type: Optional[str]
    key_powers_w: dict  # dimension -> best watts used for the score, or None
    weight_kg: Optional[float] = None


@dataclass
class DailyTrainingLoad:
    day: int  # offset from the first record
    date: Optional[date]
    tss: float
    ctl: float
    atl: float
    tsb: float


@dataclass
class TsbInterpretation:
    status: str  # very_fresh | optimal | neutral | fatigued | very_fatigued
    description: str
    recommendation: str = ""


@dataclass
class RampRate:
    percent_per_week: Optional[float]
    status: Optional[str]  # safe | unsafe | fitness_loss


@dataclass
class TrainingInsights:
    state: str  # ok | insufficient
    zone: Optional[str] = None
    impact: Optional[str] = None
    relative_impact: Optional[str] = None
    relative_ratio: Optional[float] = None
    ctl_delta: Optional[float] = None
    atl_delta: Optional[float] = None
    tsb_delta: Optional[float] = None
    summary: Optional[str] = None


@dataclass
class Split:
    split_number: float  # 1, 2, ... or fractional for the trailing partial split
    distance_m: float
    time_s: float
    pace_s_per_km: float
    average_heart_rate_bpm: Optional[float] = None
    is_partial: bool = False


@dataclass
class ClimbSegment:
    start_index: int
    end_index: int
    elevation_gain_m: float
    duration_s: float


@dataclass
class VamResult:
    vam_m_per_h: Optional[float]  # None when no climb qualified
    total_climbing_time_s: float
    total_elevation_gain_m: float
    climb_segments: List[ClimbSegment] = field(default_factory=list)


@dataclass
class RangeStats:
    start_index: int
    end_index: int
    distance_m: float
    duration_s: float
    average_speed_kmh: Optional[float]
    average_pace_s_per_km: Optional[float]
    average_heart_rate_bpm: Optional[float]
    average_power_w: Optional[float]
    average_cadence_rpm: Optional[float]
    elevation_gain_m: Optional[float]
    vam_m_per_h: Optional[float]


@dataclass
class ActivitySummary:
    activity_id: int
    activity_date: date
    power: Optional[PowerMetrics]
    power_curve: List[PowerCurveEntry] = field(default_factory=list)
    power_zones: List[ZoneBucket] = field(default_factory=list)
    heart_rate_zones: List[ZoneBucket] = field(default_factory=list)
    overall: Optional[RangeStats] = None
    splits: List[Split] = field(default_factory=list)
    vam: Optional[VamResult] = None
