from datetime import datetime, timezone

import numpy as np
import pytest

from training_metrics.config import reset_config
from training_metrics.models.types import Activity, StreamSet


def make_streams(n=1200, power_w=200.0, speed_mps=8.0, seed=7, climb_m_per_s=0.0):
    """1 Hz synthetic ride: steady speed, noisy power and heart rate."""
    rng = np.random.default_rng(seed)
    time = np.arange(n, dtype=float)
    distance = time * speed_mps
    altitude = 100.0 + time * climb_m_per_s
    watts = np.clip(power_w + rng.normal(0, 15, n), 0, None)
    heartrate = np.clip(140 + rng.normal(0, 5, n), 0, None)
    cadence = np.clip(88 + rng.normal(0, 3, n), 0, None)
    return StreamSet(
        distance=distance,
        time=time,
        altitude=altitude,
        heartrate=heartrate,
        watts=watts,
        cadence=cadence,
    )


def make_activity(activity_id, start, watts, activity_type="Ride"):
    n = len(watts)
    streams = StreamSet(
        time=np.arange(n, dtype=float),
        distance=np.arange(n, dtype=float) * 8.0,
        watts=np.asarray(watts, dtype=float),
    )
    return Activity(
        activity_id=activity_id,
        start_date=start,
        streams=streams,
        activity_type=activity_type,
        moving_time_s=float(n),
        elapsed_time_s=float(n),
    )


@pytest.fixture
def ride_streams():
    return make_streams()


@pytest.fixture
def ride_activity(ride_streams):
    return Activity(
        activity_id=101,
        start_date=datetime(2024, 5, 4, 7, 30, tzinfo=timezone.utc),
        streams=ride_streams,
        activity_type="Ride",
        moving_time_s=1200.0,
        elapsed_time_s=1260.0,
    )


@pytest.fixture(autouse=True)
def fresh_config():
    # Tests that tweak the global config must not leak into each other
    reset_config()
    yield
    reset_config()
