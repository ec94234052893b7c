from .export import (
    export_daily_load_csv,
    export_daily_tss_csv,
    export_power_curve_csv,
    export_splits_csv,
    export_yearly_curves_csv,
    export_zones_csv,
)

__all__ = [
    "export_daily_load_csv",
    "export_daily_tss_csv",
    "export_power_curve_csv",
    "export_splits_csv",
    "export_yearly_curves_csv",
    "export_zones_csv",
]
