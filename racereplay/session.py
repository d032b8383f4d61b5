"""A race: the loaded activities plus the clock that replays them.

Each RaceSession is independent. Per-frame values (position, speed, rank)
are recomputed from the immutable activities every time a snapshot is
taken; nothing is cached between frames.
"""

from typing import Iterable, Optional

from loguru import logger

from racereplay.analysis.interpolate import interpolate
from racereplay.analysis.ranking import race_standings
from racereplay.analysis.speed import estimate_speed
from racereplay.models import Activity, ActivityStats, FrameSnapshot
from racereplay.playback import PlaybackClock


def max_total_time(activities: Iterable[Activity]) -> float:
    return max((a.total_time for a in activities), default=0.0)


class RaceSession:

    def __init__(self, activities: Optional[Iterable[Activity]] = None,
                 playback_speed: float = 1.0):
        self._activities: list[Activity] = []
        self.clock = PlaybackClock(playback_speed=playback_speed)
        for activity in activities or []:
            self.add(activity)

    @property
    def activities(self) -> tuple[Activity, ...]:
        return tuple(self._activities)

    @property
    def max_time(self) -> float:
        return self.clock.max_time

    def _activity_set_changed(self):
        self.clock.set_max_time(max_total_time(self._activities))

    def add(self, activity: Activity):
        self._activities.append(activity)
        logger.info("Loaded activity {} ({} points, {:.0f} m, {:.0f} s)",
                    activity.id, len(activity.points),
                    activity.total_distance, activity.total_time)
        self._activity_set_changed()

    def remove(self, activity_id: str) -> bool:
        before = len(self._activities)
        self._activities = [a for a in self._activities if a.id != activity_id]
        removed = len(self._activities) != before
        if removed:
            self._activity_set_changed()
        return removed

    def clear(self):
        """Drop every activity (sign-out)."""
        self._activities = []
        self._activity_set_changed()

    def snapshot(self, t: Optional[float] = None) -> FrameSnapshot:
        """Everything a renderer needs for one frame, in race order."""
        t = self.clock.current_time if t is None else t
        stats = []
        for standing in race_standings(self._activities, t):
            activity = standing.activity
            point = interpolate(activity.points, t)
            stats.append(ActivityStats(
                index=standing.index,
                activity_id=activity.id,
                lat=point.lat,
                lng=point.lng,
                elevation=point.elevation,
                distance=standing.distance,
                speed_kmh=estimate_speed(activity.points, t),
                progress_pct=standing.progress_pct,
                finished=standing.finished,
                position=standing.position,
            ))
        return FrameSnapshot(
            current_time=t,
            max_time=self.clock.max_time,
            is_playing=self.clock.is_playing,
            playback_speed=self.clock.playback_speed,
            stats=stats,
        )
