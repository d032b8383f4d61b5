"""Parse .fit files into Activities using fitparse."""

from pathlib import Path

from fitparse import FitFile, FitParseError
from loguru import logger

from racereplay.analysis.geo import SEMICIRCLE_TO_DEGREES, cumulative_distances
from racereplay.errors import FITFormatError
from racereplay.ingest.tracks import build_activity, random_color, synthetic_id, UPLOAD_PALETTE
from racereplay.models import Activity, ActivityPoint, Athlete


def _extract_records(messages) -> list[dict]:
    """Per-second samples from FIT record messages that carry a position."""
    records = []
    for msg in messages:
        if msg.name != "record":
            continue

        def get(field_name, default=None):
            val = msg.get_value(field_name)
            return val if val is not None else default

        lat_semi = get("position_lat")
        lon_semi = get("position_long")
        if lat_semi is None or lon_semi is None:
            continue
        lat = lat_semi * SEMICIRCLE_TO_DEGREES
        lon = lon_semi * SEMICIRCLE_TO_DEGREES
        if lat == 0 and lon == 0:
            continue

        altitude = get("enhanced_altitude")
        if altitude is None:
            altitude = get("altitude")

        records.append({
            "timestamp": get("timestamp"),
            "lat": lat,
            "lon": lon,
            "altitude": float(altitude) if altitude is not None else None,
            "distance": float(get("distance")) if get("distance") is not None else None,
        })
    return records


def _session_sport(messages) -> str | None:
    for msg in messages:
        if msg.name == "session":
            sport = msg.get_value("sport")
            return str(sport) if sport is not None else None
    return None


def _records_to_points(records: list[dict]) -> list[ActivityPoint]:
    """Relative times and a distance column for the kept records.

    The device distance field is used only when every record has one and
    it never decreases; otherwise distance is accumulated by Haversine.
    """
    device_distances = [r["distance"] for r in records]
    use_device = all(d is not None for d in device_distances) and all(
        b >= a for a, b in zip(device_distances, device_distances[1:])
    )
    if use_device:
        base = device_distances[0]
        distances = [d - base for d in device_distances]
    else:
        distances = cumulative_distances([(r["lat"], r["lon"]) for r in records])

    has_times = all(r["timestamp"] is not None for r in records)
    start_ts = records[0]["timestamp"].timestamp() if has_times else None

    points = []
    for index, (r, distance) in enumerate(zip(records, distances)):
        if start_ts is not None:
            time_s = float(int(r["timestamp"].timestamp() - start_ts))
        else:
            time_s = float(index)
        points.append(ActivityPoint(
            lat=r["lat"],
            lng=r["lon"],
            time=time_s,
            elevation=r["altitude"],
            distance=distance,
        ))
    return points


def parse_fit_file(file_path, athlete_name: str | None = None,
                   palette=UPLOAD_PALETTE) -> Activity:
    """Parse a .fit file and return an Activity.

    Raises:
        FITFormatError: the file is not valid FIT or has no positioned records.
    """
    file_path = Path(file_path)
    try:
        fit = FitFile(str(file_path))
        messages = list(fit.get_messages())
    except FitParseError as e:
        raise FITFormatError(f"Invalid FIT file {file_path.name}: {e}") from e

    records = _extract_records(messages)
    if not records:
        raise FITFormatError(f"No positioned records found in {file_path.name}")

    points = _records_to_points(records)

    first_ts = records[0]["timestamp"]
    start_time = first_ts.isoformat() if first_ts is not None else ""

    sport = _session_sport(messages)
    name = f"{sport.title()} {file_path.stem}" if sport else file_path.stem

    activity_id = synthetic_id("fit")
    athlete = Athlete(
        id=activity_id.rsplit("_", 1)[0],
        name=athlete_name or file_path.stem,
        color=random_color(palette),
    )
    activity = build_activity(activity_id, name, athlete, points, start_time)
    logger.debug("Parsed FIT {}: {} points, {:.1f} m", file_path.name,
                 len(points), activity.total_distance)
    return activity
