import numpy as np

from training_metrics.series.indexed import bracket, lower_bound, nearest_index


def test_lower_bound_finds_first_element_at_or_above_value():
    xs = [0.0, 10.0, 10.0, 25.0, 40.0]
    assert lower_bound(xs, 10.0) == 1
    assert lower_bound(xs, 11.0) == 3
    assert lower_bound(xs, -5.0) == 0


def test_lower_bound_clamps_past_the_end_and_handles_empty():
    xs = [0.0, 10.0, 20.0]
    assert lower_bound(xs, 100.0) == 2
    assert lower_bound([], 3.0) == 0


def test_lower_bound_property_on_random_monotonic_series():
    rng = np.random.default_rng(3)
    xs = np.cumsum(rng.integers(0, 5, 500)).astype(float)
    for value in rng.uniform(xs[0], xs[-1], 200):
        i = lower_bound(xs, value)
        assert xs[i] >= value
        if i > 0:
            assert xs[i - 1] < value


def test_nearest_index_prefers_predecessor_on_tie():
    xs = [0.0, 10.0, 20.0]
    assert nearest_index(xs, 14.0) == 1
    assert nearest_index(xs, 16.0) == 2
    assert nearest_index(xs, 15.0) == 1
    assert nearest_index(xs, -1.0) == 0


def test_bracket_stays_inside_series():
    xs = [0.0, 100.0, 200.0, 300.0]
    assert bracket(xs, 150.0) == 1
    assert bracket(xs, 100.0) == 1
    assert bracket(xs, -10.0) == 0
    assert bracket(xs, 999.0) == 2
    assert bracket([5.0], 1.0) == 0
