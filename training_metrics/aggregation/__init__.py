from .trends import curve_frame, daily_load_frame, summarize_over_time, weekly_tss, yearly_curve_frame, zone_frame

__all__ = [
    "curve_frame",
    "daily_load_frame",
    "summarize_over_time",
    "weekly_tss",
    "yearly_curve_frame",
    "zone_frame",
]
