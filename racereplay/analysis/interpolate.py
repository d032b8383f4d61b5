"""Position at an arbitrary time along a recorded track.

Queries outside the recorded range clamp to the first/last sample. Inside
the range, every numeric field is linearly interpolated between the two
samples that bracket the query time.
"""

from bisect import bisect_left
from dataclasses import replace
from typing import Optional, Sequence

from racereplay.models import ActivityPoint


def _lerp(a: Optional[float], b: Optional[float], p: float) -> Optional[float]:
    if a is None or b is None:
        return a
    return a + (b - a) * p


def interpolate(points: Sequence[ActivityPoint], t: float) -> Optional[ActivityPoint]:
    """Return the (possibly synthetic) point at time ``t``.

    Returns the boundary sample itself (not a copy with ``time=t``) when ``t``
    is at or outside the recorded range, and ``points[i]`` for a zero-length
    segment. Returns None only for an empty sequence.
    """
    if not points:
        return None

    first = points[0]
    last = points[-1]
    if t <= first.time:
        return first
    if t >= last.time:
        return last

    # First pair (i, i+1) with points[i].time <= t <= points[i+1].time,
    # same pair a forward linear scan would pick.
    j = bisect_left(points, t, key=lambda p: p.time)
    i = j - 1
    a, b = points[i], points[j]

    span = b.time - a.time
    if span <= 0:
        return a

    p = (t - a.time) / span
    return replace(
        a,
        lat=a.lat + (b.lat - a.lat) * p,
        lng=a.lng + (b.lng - a.lng) * p,
        elevation=_lerp(a.elevation, b.elevation, p),
        distance=_lerp(a.distance, b.distance, p),
        time=t,
    )


def distance_at(points: Sequence[ActivityPoint], t: float) -> float:
    """Interpolated cumulative distance at ``t``; absent distance counts as 0."""
    point = interpolate(points, t)
    if point is None or point.distance is None:
        return 0.0
    return point.distance
