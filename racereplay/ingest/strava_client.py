"""Fetch a Strava activity plus its streams and normalize it.

Authorization is handled elsewhere: this module only reads an access token
from the configured token file and refuses to use it once it has expired.
"""

import json
import re
import time as time_mod
from pathlib import Path

import requests
from loguru import logger
from stravalib import Client, exc

from racereplay.errors import (
    AccessDeniedError,
    ActivityNotFoundError,
    AuthorizationError,
    IngestionError,
)
from racereplay.ingest.tracks import PALETTE, build_activity, color_for_athlete
from racereplay.models import Activity, ActivityPoint, Athlete

STREAM_TYPES = ["latlng", "time", "distance", "altitude"]

_ACTIVITY_URL_RE = re.compile(r"/activities/(\d+)")


def extract_activity_id_from_url(url: str) -> str | None:
    """'https://www.strava.com/activities/123?x=1' -> '123'"""
    match = _ACTIVITY_URL_RE.search(url)
    return match.group(1) if match else None


def parse_activity_ref(ref: str) -> str | None:
    """Accept a bare numeric id or an activity URL."""
    ref = ref.strip()
    if ref.isdigit():
        return ref
    return extract_activity_id_from_url(ref)


# ---------------------------------------------------------------------------
# Token access
# ---------------------------------------------------------------------------

def is_token_expired(expires_at: float, now: float | None = None) -> bool:
    now = time_mod.time() if now is None else now
    return now >= expires_at


def load_access_token(config: dict) -> str:
    """Read the access token from disk, rejecting missing or expired tokens."""
    token_path = Path(config["strava"]["token_file"]).expanduser()
    if not token_path.exists():
        raise AuthorizationError(
            f"Strava tokens not found at {token_path}. Authorize with Strava first."
        )
    with open(token_path) as f:
        try:
            tokens = json.load(f)
        except json.JSONDecodeError as e:
            raise AuthorizationError(f"Unreadable Strava token file {token_path}: {e}") from e

    access_token = tokens.get("access_token")
    if not access_token:
        raise AuthorizationError(f"No access_token in {token_path}")
    expires_at = tokens.get("expires_at")
    if expires_at is not None and is_token_expired(float(expires_at)):
        raise AuthorizationError("Strava access token expired: please re-authenticate with Strava")
    return access_token


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

def _stream_data(streams, key: str) -> list:
    stream = streams.get(key) if streams else None
    if stream is None:
        return []
    return list(stream.data or [])


def _athlete_name(athlete) -> str:
    first = getattr(athlete, "firstname", None) or ""
    last = getattr(athlete, "lastname", None) or ""
    name = f"{first} {last}".strip()
    return name or "Unknown Athlete"


def convert_to_activity(strava_act, streams, palette=PALETTE) -> Activity:
    """Zip the parallel streams of one Strava activity into an Activity.

    ``latlng`` and ``time`` are required. ``distance`` and ``altitude`` are
    optional; a missing or short array leaves that field absent on the
    affected points.
    """
    latlng_arr = _stream_data(streams, "latlng")
    time_arr = _stream_data(streams, "time")
    dist_arr = _stream_data(streams, "distance")
    alt_arr = _stream_data(streams, "altitude")

    if not latlng_arr or not time_arr:
        raise IngestionError(
            f"Strava activity {strava_act.id} has no GPS data (latlng/time streams missing)"
        )

    points = []
    for i, latlng in enumerate(latlng_arr):
        if not latlng:
            continue
        lat, lng = latlng[0], latlng[1]
        ts = time_arr[i] if i < len(time_arr) and time_arr[i] is not None else 0
        distance = float(dist_arr[i]) if i < len(dist_arr) and dist_arr[i] is not None else None
        elevation = float(alt_arr[i]) if i < len(alt_arr) and alt_arr[i] is not None else None
        points.append(ActivityPoint(
            lat=float(lat),
            lng=float(lng),
            time=float(ts),
            elevation=elevation,
            distance=distance,
        ))

    athlete_id = int(strava_act.athlete.id)
    athlete = Athlete(
        id=str(athlete_id),
        name=_athlete_name(strava_act.athlete),
        color=color_for_athlete(athlete_id, palette),
    )

    total_distance = float(strava_act.distance) if strava_act.distance is not None else None
    start_time = strava_act.start_date.isoformat() if strava_act.start_date else ""

    return build_activity(
        activity_id=str(strava_act.id),
        name=strava_act.name or f"Strava activity {strava_act.id}",
        athlete=athlete,
        points=points,
        start_time=start_time,
        total_distance=total_distance,
    )


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

def _translate_fault(e: exc.Fault, what: str) -> IngestionError:
    status = getattr(getattr(e, "response", None), "status_code", None)
    if isinstance(e, exc.AccessUnauthorized) or status == 401:
        return AuthorizationError("Unauthorized: please re-authenticate with Strava")
    if status == 403:
        return AccessDeniedError(f"Forbidden: you do not have access to this {what}")
    if isinstance(e, exc.ObjectNotFound) or status == 404:
        return ActivityNotFoundError(f"{what.capitalize()} not found")
    return IngestionError(f"Failed to fetch {what}: {e}")


class StravaActivityClient:
    """Thin wrapper over stravalib.Client for the two calls a race needs."""

    def __init__(self, access_token: str | None = None, client: Client | None = None,
                 resolution: str = "medium"):
        if client is None:
            if not access_token:
                raise AuthorizationError("A Strava access token is required")
            client = Client(access_token=access_token)
        self.client = client
        self.resolution = resolution

    @classmethod
    def from_config(cls, config: dict) -> "StravaActivityClient":
        strava_cfg = config.get("strava", {})
        return cls(
            access_token=load_access_token(config),
            resolution=strava_cfg.get("resolution", "medium"),
        )

    def get_activity(self, activity_id):
        try:
            return self.client.get_activity(int(activity_id))
        except exc.Fault as e:
            raise _translate_fault(e, "activity") from e
        except (exc.RateLimitExceeded, requests.exceptions.RequestException) as e:
            raise IngestionError(f"Failed to fetch activity: {e}") from e

    def get_activity_streams(self, activity_id, types=None):
        try:
            return self.client.get_activity_streams(
                int(activity_id), types=types or STREAM_TYPES, resolution=self.resolution
            )
        except exc.Fault as e:
            raise _translate_fault(e, "activity streams") from e
        except (exc.RateLimitExceeded, requests.exceptions.RequestException) as e:
            raise IngestionError(f"Failed to fetch activity streams: {e}") from e

    def get_activity_with_streams(self, activity_id) -> Activity:
        strava_act = self.get_activity(activity_id)
        streams = self.get_activity_streams(activity_id)
        activity = convert_to_activity(strava_act, streams)
        logger.debug("Fetched Strava activity {}: {} points", activity.id, len(activity.points))
        return activity
