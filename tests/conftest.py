"""Shared fixtures: small hand-built tracks with known geometry."""

import pytest

from racereplay.models import Activity, ActivityPoint, Athlete


def build_points(samples):
    """samples: iterable of (time, distance) pairs; lat/lng follow distance."""
    return [
        ActivityPoint(lat=10.0 + d / 100000, lng=20.0, time=float(t), distance=float(d))
        for t, d in samples
    ]


@pytest.fixture
def make_activity():
    def _make(activity_id, samples, total_distance=None, name=None):
        points = build_points(samples)
        return Activity(
            id=activity_id,
            name=name or f"Activity {activity_id}",
            athlete=Athlete(id=f"athlete-{activity_id}", name=f"Runner {activity_id}",
                            color="#FF6B6B"),
            points=tuple(points),
            total_distance=points[-1].distance if total_distance is None else total_distance,
            total_time=points[-1].time,
            start_time="2025-01-15T08:00:00+00:00",
        )
    return _make


@pytest.fixture
def two_point_track():
    return build_points([(0, 0), (10, 100)])


@pytest.fixture
def irregular_track():
    return build_points([(0, 0), (3, 10), (4, 14), (9, 40), (9, 41), (15, 70), (30, 150)])


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("RACEREPLAY_CONFIG", raising=False)


@pytest.fixture
def track():
    """Factory: track([(time, distance), ...]) -> list[ActivityPoint]."""
    return build_points
