"""Parse GPX documents into Activities using gpxpy.

Distance is not taken from the file; it is accumulated point to point with
the Haversine formula so every GPX track gets a monotonic distance column.
"""

import math
from datetime import datetime, timezone
from pathlib import Path

import gpxpy
import gpxpy.gpx
from loguru import logger

from racereplay.analysis.geo import cumulative_distances
from racereplay.errors import GPXFormatError
from racereplay.ingest.tracks import build_activity, random_color, synthetic_id, UPLOAD_PALETTE
from racereplay.models import Activity, ActivityPoint, Athlete

DEFAULT_ATHLETE_NAME = "GPX Upload"
DEFAULT_ACTIVITY_NAME = "GPX Activity"


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _collect_track_points(gpx: gpxpy.gpx.GPX) -> list[gpxpy.gpx.GPXTrackPoint]:
    points = []
    for track in gpx.tracks:
        for segment in track.segments:
            points.extend(segment.points)
    return points


def _activity_name(gpx: gpxpy.gpx.GPX) -> str:
    if gpx.name:
        return gpx.name
    for track in gpx.tracks:
        if track.name:
            return track.name
    return DEFAULT_ACTIVITY_NAME


def parse_gpx(gpx_content: str, athlete_name: str = DEFAULT_ATHLETE_NAME,
              palette=UPLOAD_PALETTE) -> Activity:
    """Parse GPX text into an Activity.

    Points at exactly (0, 0) are treated as missing data and dropped. When
    any kept point lacks a timestamp, time is synthesized from the point
    index (one sample per second).

    Raises:
        GPXFormatError: unparseable document, no track points, or no points
            left after dropping (0, 0).
    """
    try:
        gpx = gpxpy.parse(gpx_content)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        raise GPXFormatError(f"Invalid GPX file format: {e}") from e

    raw_points = _collect_track_points(gpx)
    if not raw_points:
        raise GPXFormatError("No track points found in GPX file")

    kept = []
    for pt in raw_points:
        lat = pt.latitude or 0.0
        lng = pt.longitude or 0.0
        if lat == 0 and lng == 0:
            continue
        kept.append(pt)

    dropped = len(raw_points) - len(kept)
    if dropped:
        logger.warning("Dropped {} GPX point(s) at (0, 0)", dropped)

    if not kept:
        raise GPXFormatError("No valid track points found in GPX file")

    has_times = all(pt.time is not None for pt in kept)
    start_dt = _utc(kept[0].time) if has_times else None

    distances = cumulative_distances([(pt.latitude, pt.longitude) for pt in kept])

    points = []
    for index, (pt, distance) in enumerate(zip(kept, distances)):
        if start_dt is not None:
            time_s = float(math.floor((_utc(pt.time) - start_dt).total_seconds()))
        else:
            time_s = float(index)
        points.append(ActivityPoint(
            lat=pt.latitude,
            lng=pt.longitude,
            time=time_s,
            elevation=float(pt.elevation) if pt.elevation is not None else None,
            distance=distance,
        ))

    if start_dt is None:
        logger.debug("GPX has no usable timestamps; using 1 s per point")
        start_dt = datetime.now(timezone.utc)

    activity_id = synthetic_id("gpx")
    athlete = Athlete(
        id=activity_id.rsplit("_", 1)[0],
        name=athlete_name,
        color=random_color(palette),
    )
    activity = build_activity(
        activity_id=activity_id,
        name=_activity_name(gpx),
        athlete=athlete,
        points=points,
        start_time=start_dt.isoformat(),
        total_distance=distances[-1],
    )
    logger.debug("Parsed GPX {!r}: {} points, {:.1f} m", activity.name,
                 len(points), activity.total_distance)
    return activity


def parse_gpx_file(file_path, athlete_name: str | None = None,
                   palette=UPLOAD_PALETTE) -> Activity:
    """Read a .gpx file and parse it; the athlete defaults to the file stem."""
    path = Path(file_path)
    with open(path, encoding="utf-8") as f:
        content = f.read()
    return parse_gpx(content, athlete_name or path.stem, palette=palette)
