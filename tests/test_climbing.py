import numpy as np
import pytest

from training_metrics.metrics.climbing import calculate_vam, find_climbs


def _profile():
    """Flat, 60 m climb over 600 s, 30 m descent, 20 m bump, flat."""
    return np.concatenate(
        [
            np.full(100, 100.0),
            np.linspace(100.0, 160.0, 601)[1:],
            np.linspace(160.0, 130.0, 101)[1:],
            np.linspace(130.0, 150.0, 201)[1:],
            np.full(100, 150.0),
        ]
    )


def test_finds_only_significant_climbs():
    altitudes = _profile()
    times = np.arange(len(altitudes), dtype=float)
    climbs = find_climbs(altitudes, times)

    assert len(climbs) == 1
    assert climbs[0].elevation_gain_m == pytest.approx(60.0)
    assert climbs[0].duration_s == pytest.approx(600.0)


def test_vam_from_climbing_time():
    altitudes = _profile()
    times = np.arange(len(altitudes), dtype=float)
    result = calculate_vam(altitudes, times)

    assert result.vam_m_per_h == pytest.approx(60.0 * 3600.0 / 600.0)
    assert result.total_elevation_gain_m == pytest.approx(60.0)
    assert len(result.climb_segments) == 1


def test_flat_ride_has_no_vam():
    result = calculate_vam(np.full(500, 50.0), np.arange(500, dtype=float))
    assert result.vam_m_per_h is None
    assert result.climb_segments == []


def test_vam_input_contract():
    assert calculate_vam(None, [0.0, 1.0]) is None
    assert calculate_vam([], []) is None
    with pytest.raises(ValueError):
        calculate_vam([1.0, 2.0, 3.0], [0.0, 1.0])
