"""Great-circle distance and itinerary time estimation.

All functions are pure. Coordinates are decimal degrees and are not range
checked; the catalog validates landmark locations on write.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from shared.domain.value_objects import GeoPoint

EARTH_RADIUS_KM = 6371
TRAVEL_MINUTES_BETWEEN_STOPS = 20


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points, in kilometers."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_travel_time(distance_km: float) -> int:
    """Minutes needed to move between two stops.

    Urban short-hop assumption: every leg takes the same fixed time whatever
    its length. Prices already issued depend on this constant.
    """

    return TRAVEL_MINUTES_BETWEEN_STOPS


def total_time(landmarks: Sequence) -> int:
    """Visit time plus one travel leg between each pair of consecutive stops."""

    if not landmarks:
        return 0
    visit_time = sum(landmark.estimated_duration for landmark in landmarks)
    return visit_time + TRAVEL_MINUTES_BETWEEN_STOPS * (len(landmarks) - 1)


def route_distance(points: Iterable[GeoPoint]) -> float:
    """Sum of leg distances along the ordered points, in kilometers."""

    total = 0.0
    previous: GeoPoint | None = None
    for point in points:
        if previous is not None:
            total += distance(previous.lat, previous.lng, point.lat, point.lng)
        previous = point
    return total


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


__all__ = [
    "EARTH_RADIUS_KM",
    "TRAVEL_MINUTES_BETWEEN_STOPS",
    "distance",
    "estimate_travel_time",
    "format_duration",
    "route_distance",
    "total_time",
]
