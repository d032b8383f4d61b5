"""Great-circle helpers shared by the ingest parsers."""

import math

EARTH_RADIUS_M = 6371000.0
SEMICIRCLE_TO_DEGREES = 180.0 / (2 ** 31)


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two lat/lon points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def cumulative_distances(coords: list[tuple[float, float]]) -> list[float]:
    """Running Haversine total along a list of (lat, lon) pairs, starting at 0."""
    total = 0.0
    out = []
    for i, (lat, lon) in enumerate(coords):
        if i > 0:
            prev_lat, prev_lon = coords[i - 1]
            total += haversine_m(prev_lat, prev_lon, lat, lon)
        out.append(total)
    return out
