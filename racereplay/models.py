from dataclasses import dataclass, field
from typing import Optional

from racereplay.errors import InvalidActivityError


@dataclass(frozen=True)
class ActivityPoint:
    lat: float
    lng: float
    time: float = 0.0
    elevation: Optional[float] = None
    distance: Optional[float] = None


@dataclass(frozen=True)
class Athlete:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class Activity:
    """One complete GPS track, normalized and read-only.

    ``points`` is stored as a tuple so nothing downstream can append to or
    reorder it. ``total_time`` must equal the last point's time.
    """

    id: str
    name: str
    athlete: Athlete
    points: tuple[ActivityPoint, ...]
    total_distance: float
    total_time: float
    start_time: str = ""

    def __post_init__(self):
        points = tuple(self.points)
        object.__setattr__(self, "points", points)

        if not points:
            raise InvalidActivityError(f"Activity {self.id!r} has no points")

        prev_time = points[0].time
        prev_dist = None
        for i, p in enumerate(points):
            if p.time < prev_time:
                raise InvalidActivityError(
                    f"Activity {self.id!r}: point {i} time {p.time} < {prev_time}"
                )
            prev_time = p.time
            if p.distance is not None:
                if prev_dist is not None and p.distance < prev_dist:
                    raise InvalidActivityError(
                        f"Activity {self.id!r}: point {i} distance {p.distance} < {prev_dist}"
                    )
                prev_dist = p.distance

        if self.total_time != points[-1].time:
            raise InvalidActivityError(
                f"Activity {self.id!r}: total_time {self.total_time} "
                f"does not match last point time {points[-1].time}"
            )


@dataclass
class PlaybackState:
    is_playing: bool = False
    current_time: float = 0.0
    playback_speed: float = 1.0


@dataclass
class Standing:
    """Where one activity sits in the race at a given time."""

    index: int
    activity: Activity
    distance: float
    progress_pct: float
    finished: bool
    position: int = 0
    is_leader: bool = False


@dataclass
class ActivityStats:
    index: int
    activity_id: str
    lat: float
    lng: float
    elevation: Optional[float]
    distance: float
    speed_kmh: float
    progress_pct: float
    finished: bool
    position: int


@dataclass
class FrameSnapshot:
    current_time: float
    max_time: float
    is_playing: bool
    playback_speed: float
    stats: list[ActivityStats] = field(default_factory=list)
