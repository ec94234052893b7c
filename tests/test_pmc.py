from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from conftest import make_activity
from training_metrics.load.pmc import (
    TrainingLoadModel,
    activity_tss,
    compute_training_load,
    current_state,
    daily_tss_from_activities,
    fill_missing_days,
    interpret_tsb,
    ramp_rate,
)
from training_metrics.metrics.curve import of_sport
from training_metrics.models.types import DailyTrainingLoad

K_CTL = 2.0 / 43.0
K_ATL = 2.0 / 8.0


def _random_tss(days=120, seed=21):
    rng = np.random.default_rng(seed)
    tss = rng.uniform(0, 150, days)
    # roughly two rest days a week
    tss[rng.random(days) < 0.3] = 0.0
    return tss


def test_first_day_from_zero_seed():
    records = compute_training_load([100.0], start_date=date(2024, 1, 1))
    assert records[0].ctl == pytest.approx(100.0 * K_CTL)
    assert records[0].atl == pytest.approx(100.0 * K_ATL)
    assert records[0].tsb == 0.0
    assert records[0].date == date(2024, 1, 1)


def test_tsb_is_previous_day_form():
    records = compute_training_load(_random_tss(), start_date=date(2024, 1, 1))
    for prev, cur in zip(records, records[1:]):
        assert cur.tsb == pytest.approx(prev.ctl - prev.atl)
        assert cur.date - prev.date == timedelta(days=1)


def test_recurrence_matches_closed_form_step():
    tss = _random_tss(30)
    records = compute_training_load(tss, initial_ctl=40.0, initial_atl=55.0)
    ctl, atl = 40.0, 55.0
    for value, record in zip(tss, records):
        ctl = value * K_CTL + ctl * (1 - K_CTL)
        atl = value * K_ATL + atl * (1 - K_ATL)
        assert record.ctl == pytest.approx(ctl)
        assert record.atl == pytest.approx(atl)
    assert records[0].tsb == pytest.approx(40.0 - 55.0)
    assert records[0].date is None


def test_recomputation_is_reproducible():
    tss = _random_tss()
    assert compute_training_load(tss) == compute_training_load(tss)


def test_rest_decays_towards_zero():
    records = compute_training_load([0.0] * 400, initial_ctl=80.0, initial_atl=90.0)
    assert records[-1].ctl < 0.01
    assert records[-1].atl < 1e-9
    assert abs(records[-1].tsb) < 0.01
    assert all(r.ctl == 0.0 and r.tsb == 0.0 for r in compute_training_load([0.0] * 100))
    assert all(b.ctl < a.ctl for a, b in zip(records, records[1:]))


def test_negative_tss_rejected():
    with pytest.raises(ValueError):
        compute_training_load([10.0, -1.0])


def test_gap_filling_and_continuity():
    tss_by_date = {date(2024, 3, 1): 80.0, date(2024, 3, 4): 120.0}
    daily = fill_missing_days(tss_by_date, date(2024, 3, 1), date(2024, 3, 5))

    assert [d for d, _ in daily] == [date(2024, 3, d) for d in range(1, 6)]
    assert [t for _, t in daily] == [80.0, 0.0, 0.0, 120.0, 0.0]

    model = TrainingLoadModel()
    with pytest.raises(ValueError):
        model.compute_dated([(date(2024, 3, 1), 10.0), (date(2024, 3, 3), 10.0)])
    with pytest.raises(ValueError):
        model.compute_dated([(date(2024, 3, 2), 10.0), (date(2024, 3, 1), 10.0)])
    with pytest.raises(ValueError):
        fill_missing_days(tss_by_date, date(2024, 3, 5), date(2024, 3, 1))


def test_compute_range_seeds_from_preceding_window():
    tss = _random_tss(60)
    start = date(2024, 1, 1)
    full = compute_training_load(tss, start_date=start)

    model = TrainingLoadModel()
    ctl, atl = model.seed(tss[:30])
    window = {start + timedelta(days=i): float(tss[i]) for i in range(30, 60)}
    tail = model.compute_range(window, start + timedelta(days=30), start + timedelta(days=59), ctl, atl)

    assert tail[-1].ctl == pytest.approx(full[-1].ctl)
    assert tail[0].tsb == pytest.approx(full[30].tsb)


def test_tsb_bands():
    assert interpret_tsb(26).status == "very_fresh"
    assert interpret_tsb(25).status == "optimal"
    assert interpret_tsb(5).status == "optimal"
    assert interpret_tsb(4.9).status == "neutral"
    assert interpret_tsb(-10).status == "neutral"
    assert interpret_tsb(-10.1).status == "fatigued"
    assert interpret_tsb(-30).status == "fatigued"
    assert interpret_tsb(-30.1).status == "very_fatigued"


def _loads(ctls):
    return [DailyTrainingLoad(day=i, date=None, tss=0.0, ctl=c, atl=0.0, tsb=0.0) for i, c in enumerate(ctls)]


def test_ramp_rate_statuses():
    assert ramp_rate(_loads([50.0] * 7 + [55.0])).status == "unsafe"
    ramp = ramp_rate(_loads([50.0] * 7 + [53.0]))
    assert ramp.percent_per_week == pytest.approx(6.0)
    assert ramp.status == "safe"
    assert ramp_rate(_loads([50.0] * 7 + [47.0])).status == "fitness_loss"


def test_ramp_rate_unavailable_without_a_week_of_history():
    assert ramp_rate(_loads([50.0] * 7)).percent_per_week is None
    assert ramp_rate(_loads([0.0] * 7 + [10.0])).percent_per_week is None
    assert ramp_rate([]).status is None


def test_daily_tss_sums_activities_per_day():
    day = datetime(2024, 6, 1, 7, tzinfo=timezone.utc)
    morning = make_activity(1, day, np.full(3600, 250.0))
    evening = make_activity(2, day + timedelta(hours=10), np.full(1800, 250.0))
    next_day = make_activity(3, day + timedelta(days=1), np.full(3600, 125.0))

    daily = daily_tss_from_activities([morning, evening, next_day], ftp_watts=250.0)
    assert daily[date(2024, 6, 1)] == pytest.approx(150.0)
    assert daily[date(2024, 6, 2)] == pytest.approx(25.0)
    assert daily_tss_from_activities([morning], ftp_watts=None) == {}


def test_tsb_bands_carry_recommendations():
    assert interpret_tsb(30).recommendation == "Good for race or hard workout. Consider increasing training load."
    assert interpret_tsb(10).recommendation == "Excellent for high-intensity workouts or racing."
    assert interpret_tsb(0).recommendation == "Continue normal training. Good for steady-state workouts."
    assert interpret_tsb(-20).recommendation == "Focus on base training. Avoid high-intensity efforts."
    assert interpret_tsb(-40).recommendation == "Consider rest or recovery week. Risk of overtraining."


def test_current_state_is_the_latest_record():
    records = compute_training_load([50.0, 80.0, 0.0], start_date=date(2024, 2, 1))
    assert current_state(records) is records[-1]
    assert current_state(records).date == date(2024, 2, 3)
    assert current_state([]) is None


def test_tss_duration_falls_back_from_moving_to_elapsed_to_samples():
    start = datetime(2024, 6, 1, 7, tzinfo=timezone.utc)
    activity = make_activity(1, start, np.full(3600, 250.0))
    activity.moving_time_s = 1800.0
    assert activity_tss(activity, 250.0) == pytest.approx(50.0)

    activity.moving_time_s = None
    activity.elapsed_time_s = 2700.0
    assert activity.charged_duration_s == 2700.0
    assert activity_tss(activity, 250.0) == pytest.approx(75.0)

    activity.elapsed_time_s = None
    assert activity.charged_duration_s == 3600.0
    assert activity_tss(activity, 250.0) == pytest.approx(100.0)


def test_daily_tss_filters_by_sport():
    day = datetime(2024, 6, 1, 7, tzinfo=timezone.utc)
    ride = make_activity(1, day, np.full(3600, 250.0))
    trainer = make_activity(2, day + timedelta(hours=10), np.full(1800, 250.0), activity_type="VirtualRide")
    run = make_activity(3, day + timedelta(days=1), np.full(3600, 250.0), activity_type="Run")
    activities = [ride, trainer, run]

    rides = daily_tss_from_activities(activities, ftp_watts=250.0, include=of_sport("Ride"))
    assert rides == {date(2024, 6, 1): pytest.approx(150.0)}
    runs = daily_tss_from_activities(activities, ftp_watts=250.0, include=of_sport("Run"))
    assert runs == {date(2024, 6, 2): pytest.approx(100.0)}


def test_daily_tss_uses_the_utc_day():
    eastern = timezone(timedelta(hours=-5))
    late = make_activity(1, datetime(2024, 6, 1, 23, 30, tzinfo=eastern), np.full(3600, 250.0))
    assert list(daily_tss_from_activities([late], ftp_watts=250.0)) == [date(2024, 6, 2)]
