import pytest

from training_metrics.metrics.profile import classify_rider, dominant_strength, strength_score
from training_metrics.models.types import PowerCurveEntry


def _curve(**watts_by_seconds):
    return [
        PowerCurveEntry(duration_label=label, duration_seconds=int(label[1:]), watts=w)
        for label, w in watts_by_seconds.items()
    ]


def test_strength_score_is_capped_at_100():
    assert strength_score(1200.0, 60.0, 24.0) == pytest.approx(100.0 * 20.0 / 24.0)
    assert strength_score(2000.0, 60.0, 24.0) == 100.0
    assert strength_score(None, 60.0, 24.0) is None
    assert strength_score(300.0, None, 6.0) is None


def test_climber_profile():
    # 70 kg: 5 s 12.0 W/kg, 60 s 6.0, 300 s 7.0, 1200 s 5.0, 3600 s 4.2
    curve = _curve(s5=840.0, s60=420.0, s300=490.0, s1200=350.0, s3600=294.0)
    profile = classify_rider(curve, 70.0)

    assert profile.strengths["climbing"] == pytest.approx(100.0 * 7.0 / 7.6)
    assert profile.rider_type == "climber"
    assert profile.key_powers_w["sprint"] == 840.0


def test_tie_order_breaks_close_scores():
    assert dominant_strength({"climbing": 80.0, "punch": 79.0, "endurance": 60.0}) == "punch"
    assert dominant_strength({"climbing": 80.0, "punch": 77.0}) == "climbing"
    assert dominant_strength({"sprint": None, "endurance": None}) is None


def test_missing_weight_or_durations_leave_profile_unavailable():
    curve = _curve(s5=900.0)
    assert classify_rider(curve, None).rider_type is None

    partial = classify_rider(curve, 75.0)
    assert partial.strengths["endurance"] is None
    assert partial.rider_type == "sprinter"
