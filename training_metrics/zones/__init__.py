"""Time-weighted zone distributions for power and heart rate."""

from .bucketer import (
    bucket_stream,
    heart_rate_bands,
    max_hr_zone_bands,
    power_zone_bands,
    sample_weights,
    total_signal_seconds,
    validate_bands,
)

__all__ = [
    "bucket_stream",
    "heart_rate_bands",
    "max_hr_zone_bands",
    "power_zone_bands",
    "sample_weights",
    "total_signal_seconds",
    "validate_bands",
]
