import math


def format_speed(speed_kmh: float) -> str:
    return f"{speed_kmh:.1f} km/h"


def format_pace(speed_kmh: float) -> str:
    """Pace per km as M:SS (e.g. '5:00' at 12 km/h)."""
    if speed_kmh <= 0:
        return "--:--"
    pace_min_per_km = 60 / speed_kmh
    minutes = math.floor(pace_min_per_km)
    seconds = round((pace_min_per_km - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d}"


def format_time(seconds: float) -> str:
    """Elapsed time as M:SS; minutes are not rolled into hours."""
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02d}"


def format_distance(meters: float) -> str:
    return f"{meters / 1000:.2f} km"
