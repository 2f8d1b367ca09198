"""Great-circle distance helpers."""

import math
from numbers import Real

EARTH_RADIUS_KM = 6371.0
# Emergencies further than this from the doctor get a nearest-hospital hint
DISTANCE_WARNING_KM = 20.0
DISTANCE_WARNING_MIN_SCORE = 6


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def distance_in_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float | None:
    """
    Haversine distance between two coordinates.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        Distance in kilometres rounded to 2 decimals, or None when any
        argument is not a number
    """
    if not all(_is_number(v) for v in (lat1, lon1, lat2, lon2)):
        return None

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 2)


def should_show_distance_warning(distance_km: float | None, emergency_score: int) -> bool:
    """Far-away, high-scoring emergencies should seek the nearest hospital."""
    if distance_km is None:
        return False
    return distance_km > DISTANCE_WARNING_KM and emergency_score >= DISTANCE_WARNING_MIN_SCORE
