"""Instantaneous speed from a trailing window of samples.

Tiers, first non-zero result wins:
  1. 10 s window, needs >= 2 s of elapsed data
  2. 5 s window, any positive elapsed time
  3. overall average (distance so far / t)
Negative distance deltas (GPS noise) skip a tier instead of producing a
negative speed.
"""

from bisect import bisect_left, bisect_right
from typing import Sequence

from racereplay.analysis.interpolate import distance_at
from racereplay.models import ActivityPoint

MS_TO_KMH = 3.6

PRIMARY_WINDOW_S = 10.0
PRIMARY_MIN_ELAPSED_S = 2.0
FALLBACK_WINDOW_S = 5.0


def _window_speed(points: Sequence[ActivityPoint], t: float, window_s: float,
                  min_elapsed_s: float | None) -> float:
    """Average m/s between the first and last sample in [t - window_s, t]."""
    start = max(0.0, t - window_s)
    lo = bisect_left(points, start, key=lambda p: p.time)
    hi = bisect_right(points, t, key=lambda p: p.time)
    if hi - lo < 2:
        return 0.0

    first = points[lo]
    last = points[hi - 1]
    elapsed = last.time - first.time
    delta = (last.distance or 0.0) - (first.distance or 0.0)

    if min_elapsed_s is not None:
        if elapsed < min_elapsed_s:
            return 0.0
    elif elapsed <= 0:
        return 0.0
    if delta < 0:
        return 0.0
    return delta / elapsed


def estimate_speed_ms(points: Sequence[ActivityPoint], t: float) -> float:
    if not points:
        return 0.0

    speed = _window_speed(points, t, PRIMARY_WINDOW_S, PRIMARY_MIN_ELAPSED_S)

    if speed == 0:
        speed = _window_speed(points, t, FALLBACK_WINDOW_S, None)

    if speed == 0 and t > 0:
        speed = distance_at(points, t) / t

    return max(0.0, speed)


def estimate_speed(points: Sequence[ActivityPoint], t: float) -> float:
    """Smoothed speed at ``t`` in km/h, never negative."""
    return estimate_speed_ms(points, t) * MS_TO_KMH
