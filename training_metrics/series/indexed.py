"""Binary search over non-decreasing series (distance, elapsed time)."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Sequence


def lower_bound(xs: Sequence[float], value: float) -> int:
    """Smallest index i with xs[i] >= value.

    Returns len(xs) - 1 when every element is below ``value`` and 0 for an
    empty series, so the result can always be used as an index into a
    non-empty series.
    """
    n = len(xs)
    if n == 0:
        return 0
    idx = bisect_left(xs, value)
    return min(idx, n - 1)


def nearest_index(xs: Sequence[float], value: float) -> int:
    """Index whose element is numerically closest to ``value``.

    Compares the lower-bound candidate with its predecessor; on an exact tie
    the predecessor wins.
    """
    if len(xs) == 0:
        return 0
    upper = lower_bound(xs, value)
    if upper <= 0:
        return 0
    lower = upper - 1
    if abs(xs[upper] - value) < abs(xs[lower] - value):
        return upper
    return lower


def bracket(xs: Sequence[float], value: float) -> int:
    """Index i with xs[i] <= value < xs[i + 1], clamped to [0, len(xs) - 2]."""
    n = len(xs)
    if n < 2:
        return 0
    idx = bisect_right(xs, value)
    return max(0, min(idx - 1, n - 2))
