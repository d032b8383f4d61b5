import pytest

from racereplay.analysis.interpolate import distance_at, interpolate
from racereplay.models import ActivityPoint


def test_midpoint_distance(two_point_track):
    assert interpolate(two_point_track, 5).distance == pytest.approx(50.0)


def test_all_numeric_fields_interpolated():
    points = [
        ActivityPoint(lat=0.0, lng=10.0, time=0, elevation=100.0, distance=0.0),
        ActivityPoint(lat=1.0, lng=12.0, time=4, elevation=140.0, distance=400.0),
    ]
    p = interpolate(points, 1)
    assert p.lat == pytest.approx(0.25)
    assert p.lng == pytest.approx(10.5)
    assert p.elevation == pytest.approx(110.0)
    assert p.distance == pytest.approx(100.0)
    assert p.time == 1


def test_boundaries_return_samples_unchanged(irregular_track):
    assert interpolate(irregular_track, irregular_track[0].time) is irregular_track[0]
    assert interpolate(irregular_track, irregular_track[-1].time) is irregular_track[-1]


def test_queries_outside_range_clamp(irregular_track):
    before = interpolate(irregular_track, -50)
    after = interpolate(irregular_track, 10_000)
    assert before is irregular_track[0]
    assert before.time == 0
    assert after is irregular_track[-1]


def test_duplicate_timestamps_do_not_divide_by_zero(irregular_track):
    # (9, 40) and (9, 41) share a timestamp
    p = interpolate(irregular_track, 9)
    assert p.distance == pytest.approx(40.0)
    p = interpolate(irregular_track, 9.0001)
    assert 41.0 <= p.distance <= 70.0


def test_all_points_same_time():
    points = [ActivityPoint(lat=1.0, lng=1.0, time=5.0, distance=0.0),
              ActivityPoint(lat=2.0, lng=2.0, time=5.0, distance=3.0)]
    assert interpolate(points, 5.0) is points[0]
    assert interpolate(points, 7.0) is points[-1]


def test_missing_elevation_stays_missing():
    points = [ActivityPoint(lat=0.0, lng=0.0, time=0, distance=0.0),
              ActivityPoint(lat=1.0, lng=1.0, time=2, elevation=50.0, distance=10.0)]
    assert interpolate(points, 1).elevation is None


def test_distance_is_monotonic(irregular_track):
    times = [t / 4 for t in range(-8, 4 * 35)]
    distances = [distance_at(irregular_track, t) for t in times]
    assert all(b >= a for a, b in zip(distances, distances[1:]))


def test_deterministic(irregular_track):
    assert interpolate(irregular_track, 12.3) == interpolate(irregular_track, 12.3)


def test_single_point_track():
    points = [ActivityPoint(lat=1.0, lng=2.0, time=0.0, distance=0.0)]
    assert interpolate(points, 0) is points[0]
    assert interpolate(points, 99) is points[0]


def test_empty_sequence():
    assert interpolate([], 3) is None
    assert distance_at([], 3) == 0.0
