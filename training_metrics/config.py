"""
Configuration for the training metrics engine.

Module-level constants hold the defaults; computational functions take each
of these as an explicit keyword argument. ``MetricsConfig`` gathers them for
the orchestration layer and the CLI.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Power
NP_WINDOW_S: int = 30

# (seconds, label) ladder for best-effort power curves
DURATION_LADDER: Tuple[Tuple[int, str], ...] = (
    (1, "1s"),
    (2, "2s"),
    (3, "3s"),
    (5, "5s"),
    (10, "10s"),
    (15, "15s"),
    (20, "20s"),
    (30, "30s"),
    (45, "45s"),
    (60, "1min"),
    (120, "2min"),
    (180, "3min"),
    (300, "5min"),
    (480, "8min"),
    (600, "10min"),
    (900, "15min"),
    (1200, "20min"),
    (1800, "30min"),
    (2700, "45min"),
    (3600, "1h"),
    (7200, "2h"),
    (10800, "3h"),
)

# Zones: (label, lower bound, colour). Power bounds are fractions of FTP,
# max-HR bounds are fractions of max heart rate, fixed HR bounds are bpm.
COGGAN_POWER_ZONES: Tuple[Tuple[str, float, str], ...] = (
    ("Active Recovery", 0.0, "#9ca3af"),
    ("Endurance", 0.55, "#60a5fa"),
    ("Tempo", 0.76, "#34d399"),
    ("Threshold", 0.91, "#fbbf24"),
    ("VO2 Max", 1.06, "#fb923c"),
    ("Anaerobic", 1.21, "#f87171"),
    ("Neuromuscular", 1.51, "#dc2626"),
)

HEART_RATE_BANDS: Tuple[Tuple[str, float, str], ...] = (
    ("<120", 0.0, "#9ca3af"),
    ("120-139", 120.0, "#60a5fa"),
    ("140-159", 140.0, "#34d399"),
    ("160-179", 160.0, "#fbbf24"),
    (">=180", 180.0, "#f87171"),
)

MAX_HR_ZONES: Tuple[Tuple[str, float, str], ...] = (
    ("Very Light", 0.0, "#9ca3af"),
    ("Light", 0.60, "#60a5fa"),
    ("Moderate", 0.70, "#34d399"),
    ("Hard", 0.80, "#fbbf24"),
    ("Maximum", 0.90, "#f87171"),
)

# Training load
CTL_DAYS: int = 42
ATL_DAYS: int = 7
RAMP_UNSAFE_PCT: float = 8.0
RAMP_LOSS_PCT: float = -5.0

# Resampling and selection
RESAMPLE_INTERVAL_M: float = 100.0
MAX_CHART_POINTS: int = 320
MIN_SELECTION_KM: float = 0.05

# Splits and climbing
SPLIT_DISTANCE_M: float = 1000.0
MIN_PARTIAL_SPLIT_M: float = 100.0
MIN_CLIMB_HEIGHT_M: float = 25.0
CLIMB_DESCENT_TOLERANCE_M: float = 10.0

# Rider profile: dimension -> (duration seconds, benchmark W/kg)
STRENGTH_BENCHMARKS: Dict[str, Tuple[int, float]] = {
    "sprint": (5, 24.0),
    "punch": (60, 11.5),
    "climbing": (300, 7.6),
    "time_trial": (1200, 6.4),
    "endurance": (3600, 6.0),
}
STRENGTH_TIE_ORDER: Tuple[str, ...] = ("sprint", "punch", "climbing", "time_trial", "endurance")
RIDER_TYPE_LABELS: Dict[str, str] = {
    "sprint": "sprinter",
    "punch": "puncheur",
    "climbing": "climber",
    "time_trial": "time_trialist",
    "endurance": "endurance",
}
STRENGTH_TIE_EPSILON: float = 2.0


@dataclass
class PowerSettings:
    """Power metric configuration."""
    np_window_s: int = NP_WINDOW_S
    duration_ladder: Tuple[Tuple[int, str], ...] = DURATION_LADDER


@dataclass
class ZoneSettings:
    """Zone model configuration."""
    power_zones: Tuple[Tuple[str, float, str], ...] = COGGAN_POWER_ZONES
    heart_rate_bands: Tuple[Tuple[str, float, str], ...] = HEART_RATE_BANDS
    max_hr_zones: Tuple[Tuple[str, float, str], ...] = MAX_HR_ZONES
    use_max_hr_zones: bool = False  # fixed bpm bands unless max HR zones are requested


@dataclass
class LoadSettings:
    """Performance Management Chart configuration."""
    ctl_days: int = CTL_DAYS
    atl_days: int = ATL_DAYS
    ramp_unsafe_pct: float = RAMP_UNSAFE_PCT
    ramp_loss_pct: float = RAMP_LOSS_PCT


@dataclass
class ResampleSettings:
    """Chart resampling and selection configuration."""
    interval_m: float = RESAMPLE_INTERVAL_M
    max_points: int = MAX_CHART_POINTS
    min_selection_km: float = MIN_SELECTION_KM
    split_distance_m: float = SPLIT_DISTANCE_M
    min_partial_split_m: float = MIN_PARTIAL_SPLIT_M
    min_climb_height_m: float = MIN_CLIMB_HEIGHT_M


@dataclass
class ProfileSettings:
    """Rider strength classification configuration."""
    benchmarks: Dict[str, Tuple[int, float]] = field(default_factory=lambda: dict(STRENGTH_BENCHMARKS))
    tie_order: Tuple[str, ...] = STRENGTH_TIE_ORDER
    tie_epsilon: float = STRENGTH_TIE_EPSILON
    labels: Dict[str, str] = field(default_factory=lambda: dict(RIDER_TYPE_LABELS))


class MetricsConfig:
    """Main configuration object for the training metrics engine."""

    def __init__(self):
        self.power = PowerSettings()
        self.zones = ZoneSettings()
        self.load = LoadSettings()
        self.resample = ResampleSettings()
        self.profile = ProfileSettings()
        self._user_inputs: Dict[str, Any] = {}

    def _update(self, section_name: str, **kwargs) -> None:
        section = getattr(self, section_name)
        for key, value in kwargs.items():
            if hasattr(section, key):
                setattr(section, key, value)
                self._user_inputs[f'{section_name}_{key}'] = value
            else:
                raise ValueError(f"Unknown {section_name} setting: {key}")

    def update_power_settings(self, **kwargs):
        self._update("power", **kwargs)

    def update_zone_settings(self, **kwargs):
        self._update("zones", **kwargs)

    def update_load_settings(self, **kwargs):
        self._update("load", **kwargs)

    def update_resample_settings(self, **kwargs):
        self._update("resample", **kwargs)

    def update_profile_settings(self, **kwargs):
        self._update("profile", **kwargs)

    def validate_configuration(self) -> bool:
        """Validate that settings are internally consistent."""
        errors: List[str] = []

        if self.power.np_window_s <= 0:
            errors.append("NP window must be greater than 0")
        if any(seconds <= 0 for seconds, _ in self.power.duration_ladder):
            errors.append("Duration ladder entries must be greater than 0")
        if self.load.ctl_days <= 0 or self.load.atl_days <= 0:
            errors.append("PMC time constants must be greater than 0")
        if self.resample.interval_m <= 0:
            errors.append("Resample interval must be greater than 0")
        if self.resample.max_points <= 0:
            errors.append("Chart point budget must be greater than 0")
        missing = [d for d in self.profile.tie_order if d not in self.profile.benchmarks]
        if missing:
            errors.append(f"Tie order names unknown strengths: {', '.join(missing)}")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        return True

    def get_summary(self) -> Dict[str, Any]:
        return {
            'power': {
                'np_window_s': self.power.np_window_s,
                'durations': [seconds for seconds, _ in self.power.duration_ladder],
            },
            'load': {
                'ctl_days': self.load.ctl_days,
                'atl_days': self.load.atl_days,
            },
            'resample': {
                'interval_m': self.resample.interval_m,
                'max_points': self.resample.max_points,
            },
            'user_inputs': self._user_inputs,
        }


# Global configuration instance
config = MetricsConfig()


def get_config() -> MetricsConfig:
    """Get the global configuration instance."""
    return config


def reset_config() -> MetricsConfig:
    """Reset configuration to defaults."""
    global config
    config = MetricsConfig()
    return config


def ladder_label(seconds: int, ladder: Optional[Tuple[Tuple[int, str], ...]] = None) -> str:
    """Label for a duration, from the ladder when present, otherwise derived."""
    for ladder_seconds, label in (ladder or DURATION_LADDER):
        if ladder_seconds == seconds:
            return label
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}min"
    return f"{seconds // 3600}h"
