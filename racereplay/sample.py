"""Demo racers on a loop around a park, for trying the replay without data."""

import math

from racereplay.models import Activity, ActivityPoint, Athlete

OSLO_LAT = 59.9311
OSLO_LNG = 10.7579
LOOP_DISTANCE_M = 3200.0


def generate_route_points(start_lat: float, start_lng: float, offset_lat: float,
                          offset_lng: float, duration: int,
                          total_distance: float = LOOP_DISTANCE_M) -> list[ActivityPoint]:
    """One point every 10 seconds around a roughly circular ~500 m radius loop.

    The last point closes the loop at ``duration`` seconds and ``total_distance``.
    """
    points = []
    total_points = duration // 10
    for i in range(total_points + 1):
        progress = i / total_points
        angle = progress * 2 * math.pi
        points.append(ActivityPoint(
            lat=start_lat + offset_lat + math.cos(angle) * 0.005,
            lng=start_lng + offset_lng + math.sin(angle) * 0.007,
            time=float(i * 10),
            distance=progress * total_distance,
            elevation=100 + math.sin(angle * 2) * 20,
        ))
    return points


def _sample(activity_id, name, athlete_id, athlete_name, color,
            offset_lat, offset_lng, duration):
    points = generate_route_points(OSLO_LAT, OSLO_LNG, offset_lat, offset_lng, duration)
    return Activity(
        id=activity_id,
        name=name,
        athlete=Athlete(id=athlete_id, name=athlete_name, color=color),
        points=tuple(points),
        total_distance=LOOP_DISTANCE_M,
        total_time=points[-1].time,
        start_time="2025-01-15T08:00:00Z",
    )


def sample_activities() -> list[Activity]:
    return [
        _sample("1", "Morning Run with Sarah", "sarah-123", "Sarah Johnson", "#FF6B6B",
                0, 0, 1800),
        _sample("2", "Park Loop Challenge", "mike-456", "Mike Chen", "#4ECDC4",
                0.001, 0.001, 1650),
        _sample("3", "Easy Jog", "anna-789", "Anna Peterson", "#45B7D1",
                -0.001, 0.002, 2100),
        _sample("4", "Speed Training", "tom-012", "Tom Wilson", "#F7DC6F",
                0.002, -0.001, 1500),
    ]
