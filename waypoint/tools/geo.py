import math
from typing import Sequence

from waypoint.models.domain import LatLng

METERS_PER_DEGREE = 111000.0
WALKING_SPEED_M_PER_MIN = 80.0


def approximate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Equirectangular approximation in meters. Good enough for city-scale distances.
    """
    lat_diff = (lat2 - lat1) * METERS_PER_DEGREE
    lon_diff = (lon2 - lon1) * METERS_PER_DEGREE * math.cos(math.radians(lat1))
    return math.sqrt(lat_diff * lat_diff + lon_diff * lon_diff)


def path_distance(points: Sequence[LatLng]) -> float:
    """Sum of the pairwise approximate distances along the path."""
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += approximate_distance(a.latitude, a.longitude, b.latitude, b.longitude)
    return total


def walking_minutes(meters: float) -> int:
    return int(round(meters / WALKING_SPEED_M_PER_MIN))


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{int(meters)} m"


def format_duration(minutes: int) -> str:
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        return f"{hours} hr {mins} min" if mins else f"{hours} hr"
    return f"{minutes} min"
