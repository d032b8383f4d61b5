"""Race order by distance covered at a shared virtual time."""

from typing import Sequence

from racereplay.analysis.interpolate import distance_at
from racereplay.models import Activity, Standing


def rank(activities: Sequence[Activity], t: float) -> list[int]:
    """Indices of ``activities`` ordered leader first.

    Equal distances keep their input order (sorted() is stable).
    """
    distances = [distance_at(a.points, t) for a in activities]
    return sorted(range(len(activities)), key=lambda i: -distances[i])


def progress_pct(activity: Activity, distance: float) -> float:
    if activity.total_distance <= 0:
        return 0.0
    return distance / activity.total_distance * 100


def is_finished(activity: Activity, distance: float) -> bool:
    """Finished activities keep their place in the ranking; they are only flagged."""
    if activity.total_distance <= 0:
        return False
    return distance / activity.total_distance >= 1


def race_standings(activities: Sequence[Activity], t: float) -> list[Standing]:
    """Standings at ``t`` in ranked order, with 1-based positions."""
    standings = []
    for position, i in enumerate(rank(activities, t), start=1):
        activity = activities[i]
        distance = distance_at(activity.points, t)
        standings.append(Standing(
            index=i,
            activity=activity,
            distance=distance,
            progress_pct=progress_pct(activity, distance),
            finished=is_finished(activity, distance),
            position=position,
            is_leader=position == 1,
        ))
    return standings
