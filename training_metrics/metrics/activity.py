"""
Activity-level metrics for the training metrics engine.
Gathers power, power curve, zone, range, split and climbing metrics for one activity.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..config import MetricsConfig, get_config
from ..models.athlete_profile import AthleteProfile
from ..models.types import Activity, ActivitySummary, PowerMetrics, ZoneBucket
from ..zones.bucketer import bucket_stream, heart_rate_bands, max_hr_zone_bands, power_zone_bands
from .climbing import calculate_vam
from .curve import activity_power_curve
from .power import compute_power_metrics
from .range_stats import compute_range_stats, compute_splits, full_range

logger = logging.getLogger(__name__)


class ActivityMetricsCalculator:
    """
    Calculate the full metric summary of one activity.
    """

    def __init__(self, config: Optional[MetricsConfig] = None):
        self.config = config or get_config()

    def calculate_activity_metrics(self, activity: Activity, athlete: AthleteProfile) -> ActivitySummary:
        """
        Calculate activity metrics from its streams and the athlete's settings.

        Args:
            activity: Activity with its raw streams
            athlete: Athlete settings (FTP, max HR) used for TSS and zones

        Returns:
            ActivitySummary; parts needing missing streams or settings are None or empty
        """
        streams = activity.streams
        logger.info(f"Calculating metrics for activity {activity.activity_id}")

        power = self._calculate_power_metrics(activity, athlete)
        curve = activity_power_curve(streams.watts, self.config.power.duration_ladder, activity=activity)
        power_zones = self._calculate_power_zones(activity, athlete)
        hr_zones = self._calculate_heart_rate_zones(activity, athlete)

        selection = full_range(streams)
        overall = compute_range_stats(streams, selection) if selection is not None else None

        resample = self.config.resample
        splits = compute_splits(
            streams.distance,
            streams.time,
            streams.heartrate,
            split_m=resample.split_distance_m,
            min_partial_m=resample.min_partial_split_m,
        )
        vam = None
        if streams.altitude is not None and streams.time is not None:
            n = streams.common_length("altitude", "time")
            vam = calculate_vam(
                streams.altitude[:n],
                streams.time[:n],
                min_climb_height_m=resample.min_climb_height_m,
            )

        summary = ActivitySummary(
            activity_id=activity.activity_id,
            activity_date=activity.day,
            power=power,
            power_curve=curve,
            power_zones=power_zones,
            heart_rate_zones=hr_zones,
            overall=overall,
            splits=splits,
            vam=vam,
        )

        if power is not None and power.training_stress_score is not None:
            logger.info(
                f"Activity {activity.activity_id}: NP {power.normalized_power_w:.0f} W, "
                f"IF {power.intensity_factor:.2f}, TSS {power.training_stress_score:.0f}"
            )
        return summary

    def _calculate_power_metrics(self, activity: Activity, athlete: AthleteProfile) -> Optional[PowerMetrics]:
        watts = activity.streams.watts
        if watts is None or len(watts) == 0:
            return None
        return compute_power_metrics(
            watts, activity.charged_duration_s, athlete.ftp_watts, window_s=self.config.power.np_window_s
        )

    def _calculate_power_zones(self, activity: Activity, athlete: AthleteProfile) -> List[ZoneBucket]:
        bands = power_zone_bands(athlete.ftp_watts, self.config.zones.power_zones)
        if bands is None:
            return []
        return bucket_stream(activity.streams.watts, bands, times=activity.streams.time)

    def _calculate_heart_rate_zones(self, activity: Activity, athlete: AthleteProfile) -> List[ZoneBucket]:
        zones = self.config.zones
        bands = None
        if zones.use_max_hr_zones:
            bands = max_hr_zone_bands(athlete.max_hr_bpm, zones.max_hr_zones)
        if bands is None:
            bands = heart_rate_bands(zones.heart_rate_bands)
        return bucket_stream(activity.streams.heartrate, bands, times=activity.streams.time)


def calculate_activity_metrics(activity: Activity, athlete: AthleteProfile) -> ActivitySummary:
    """Calculate activity metrics with the global configuration."""
    return ActivityMetricsCalculator().calculate_activity_metrics(activity, athlete)
