"""Helpers shared by every ingest path: palette, ids, Activity assembly."""

import random
import string
import time as time_mod
from typing import Optional

from racereplay.errors import IngestionError
from racereplay.models import Activity, ActivityPoint, Athlete

PALETTE = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#F7DC6F", "#BB8FCE", "#85C1E9", "#F8C471", "#82E0AA",
    "#E74C3C", "#3498DB", "#9B59B6", "#F39C12", "#E67E22", "#1ABC9C", "#2ECC71", "#34495E",
    "#E91E63", "#9C27B0", "#673AB7", "#3F51B5", "#2196F3", "#00BCD4", "#009688", "#4CAF50",
    "#8BC34A", "#CDDC39", "#FFEB3B", "#FFC107", "#FF9800", "#FF5722", "#795548", "#607D8B",
)

# Uploaded files get one of the first eight colors at random
UPLOAD_PALETTE = PALETTE[:8]

_ID_ALPHABET = string.digits + string.ascii_lowercase


def color_for_athlete(athlete_id: int, palette=PALETTE) -> str:
    """Same athlete, same color, every run."""
    return palette[int(athlete_id) % len(palette)]


def random_color(palette=UPLOAD_PALETTE, rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(palette)


def synthetic_id(prefix: str, rng: Optional[random.Random] = None) -> str:
    """e.g. gpx_1718000000000_k3j9x0q2a"""
    rng = rng or random
    millis = int(time_mod.time() * 1000)
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{millis}_{suffix}"


def build_activity(activity_id: str, name: str, athlete: Athlete,
                   points: list[ActivityPoint], start_time: str,
                   total_distance: Optional[float] = None) -> Activity:
    """Assemble an Activity, deriving totals from the points.

    ``total_distance`` defaults to the last point's cumulative distance.
    """
    if not points:
        raise IngestionError(f"No usable points for activity {activity_id!r}")

    if total_distance is None:
        total_distance = points[-1].distance or 0.0

    return Activity(
        id=activity_id,
        name=name,
        athlete=athlete,
        points=tuple(points),
        total_distance=float(total_distance),
        total_time=points[-1].time,
        start_time=start_time,
    )
