"""Virtual race clock and the frame loop that drives it.

PlaybackClock is a two-state machine (stopped / playing). All transitions
happen on one thread, once per frame or on a user command, so no locking
is needed. FrameScheduler turns wall-clock frame callbacks into tick()
calls.
"""

import time as time_mod
from typing import Callable, Optional

from racereplay.models import PlaybackState

SPEED_OPTIONS = (0.5, 1, 1.5, 2, 3, 5)


class PlaybackClock:
    """Owns the only mutable state in a race: current time, speed, playing flag."""

    def __init__(self, max_time: float = 0.0, playback_speed: float = 1.0):
        if playback_speed <= 0:
            raise ValueError(f"playback_speed must be > 0, got {playback_speed}")
        self.state = PlaybackState(playback_speed=float(playback_speed))
        self.max_time = max(0.0, float(max_time))
        self.auto_pause_count = 0

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @property
    def current_time(self) -> float:
        return self.state.current_time

    @property
    def playback_speed(self) -> float:
        return self.state.playback_speed

    def play(self):
        self.state.is_playing = True

    def pause(self):
        self.state.is_playing = False

    def toggle(self):
        """Play/pause button."""
        self.state.is_playing = not self.state.is_playing

    def seek(self, t: float):
        self.state.current_time = min(max(float(t), 0.0), self.max_time)

    def set_speed(self, multiplier: float):
        if multiplier <= 0:
            raise ValueError(f"playback_speed must be > 0, got {multiplier}")
        self.state.playback_speed = float(multiplier)

    def reset(self):
        self.state.current_time = 0.0
        self.state.is_playing = False

    def set_max_time(self, max_time: float):
        """Called whenever the loaded activity set changes."""
        self.max_time = max(0.0, float(max_time))
        if self.state.current_time > self.max_time:
            self.state.current_time = self.max_time

    def tick(self, dt: float) -> bool:
        """Advance by ``dt`` wall-clock seconds scaled by the playback speed.

        Does nothing while stopped. Returns True if this tick auto-paused the
        clock at max_time.
        """
        if not self.state.is_playing:
            return False

        new_time = min(self.state.current_time + max(dt, 0.0) * self.state.playback_speed,
                       self.max_time)
        self.state.current_time = new_time

        if new_time >= self.max_time:
            self.state.current_time = self.max_time
            self.state.is_playing = False
            self.auto_pause_count += 1
            return True
        return False


class FrameScheduler:
    """Calls ``clock.tick`` once per frame using measured frame deltas.

    The first frame after (re)starting only records a timestamp, so
    resuming after a pause never jumps by the time spent paused.
    """

    def __init__(self, clock: PlaybackClock, fps: float = 30,
                 now: Optional[Callable[[], float]] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self.clock = clock
        self.frame_interval = 1.0 / fps
        self._now = now or time_mod.monotonic
        self._sleep = sleep or time_mod.sleep
        self._last_frame: Optional[float] = None

    def restart(self):
        self._last_frame = None

    def frame(self) -> bool:
        """Process one frame. Returns True if the clock auto-paused."""
        now = self._now()
        if not self.clock.is_playing:
            self._last_frame = None
            return False
        if self._last_frame is None:
            self._last_frame = now
            return False
        dt = now - self._last_frame
        self._last_frame = now
        return self.clock.tick(dt)

    def run(self, on_frame: Optional[Callable[[int], None]] = None,
            max_frames: Optional[int] = None) -> int:
        """Run frames until the clock stops. Returns the number of frames run."""
        frames = 0
        self.restart()
        while self.clock.is_playing:
            self.frame()
            frames += 1
            if on_frame is not None:
                on_frame(frames)
            if max_frames is not None and frames >= max_frames:
                break
            if self.clock.is_playing:
                self._sleep(self.frame_interval)
        return frames
