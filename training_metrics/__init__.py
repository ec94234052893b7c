"""Training metrics derived from per-activity sensor streams.

Modules:
- series: Monotonic index search and stream resampling
- zones: Time-weighted zone distributions
- metrics: Power metrics, power curves, rider profile, range statistics
- load: Performance Management Chart (CTL/ATL/TSB) and training insights
- models: Typed domain objects
- aggregation: Cross-activity tables
- storage: Export helpers
- cli: Command line interface
"""

__version__ = "1.0.0"

__all__ = [
    "series",
    "zones",
    "metrics",
    "load",
    "models",
    "aggregation",
    "storage",
    "cli",
]
