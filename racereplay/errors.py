"""Exceptions raised at the ingestion and configuration boundaries.

The engine functions (interpolation, speed, ranking, playback) never raise
for any query time; everything that can go wrong happens before an Activity
exists.
"""


class RaceReplayError(Exception):
    """Base class for all racereplay errors."""


class ConfigError(RaceReplayError):
    pass


class IngestionError(RaceReplayError):
    """A track could not be turned into an Activity."""


class GPXFormatError(IngestionError):
    pass


class FITFormatError(IngestionError):
    pass


class InvalidActivityError(IngestionError):
    """Points violate the ordering or non-empty invariants."""


class AuthorizationError(IngestionError):
    """Missing, rejected, or expired Strava access token."""


class AccessDeniedError(IngestionError):
    pass


class ActivityNotFoundError(IngestionError):
    pass
