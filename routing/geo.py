"""
Purpose: Great-circle distance scoring between two coordinates.
What it does:
- Computes the haversine distance in kilometers (Earth radius 6371 km).
- Treats any missing / NaN / infinite / non-numeric coordinate as
  "unknown location" and returns +inf (unknown locations sort last).

Rule: Pure math, no store access, never raises.
"""

from __future__ import annotations

import math
from typing import Any, Optional

EARTH_RADIUS_KM = 6371.0


def _as_coordinate(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def distance_km(lat1: Any, lon1: Any, lat2: Any, lon2: Any) -> float:
    """
    Haversine distance in km between (lat1, lon1) and (lat2, lon2).

    Returns math.inf if any of the four inputs is missing or not a number.
    """
    coordinates = [_as_coordinate(value) for value in (lat1, lon1, lat2, lon2)]
    if any(value is None for value in coordinates):
        return math.inf

    start_lat, start_lon, end_lat, end_lon = (math.radians(value) for value in coordinates)
    delta_lat = end_lat - start_lat
    delta_lon = end_lon - start_lon

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
