"""Monotonic index search and stream resampling."""

from .indexed import bracket, lower_bound, nearest_index
from .resample import derive_speed_kmh, resample_at_interval, sample_range

__all__ = [
    "bracket",
    "lower_bound",
    "nearest_index",
    "derive_speed_kmh",
    "resample_at_interval",
    "sample_range",
]
