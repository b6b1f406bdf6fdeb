"""Geospatial utilities used for distance calculations."""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Protocol

EARTH_RADIUS_KM = 6371.0

# Home feed "near me" default; the search radius default lives with
# FilterCriteria and is configured separately.
NEAR_ME_RADIUS_KM = 50.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Calculate distance between two lat/lng points in kilometers.

    Args:
        lat1: Latitude of the first point.
        lng1: Longitude of the first point.
        lat2: Latitude of the second point.
        lng2: Longitude of the second point.

    Returns:
        Distance in kilometers. NaN inputs yield NaN.
    """

    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)

    delta_lat = lat2_rad - lat1_rad
    delta_lng = radians(lng2 - lng1)

    a = sin(delta_lat / 2) ** 2 + cos(lat1_rad) * cos(lat2_rad) * sin(
        delta_lng / 2
    ) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: HasCoordinates, b: HasCoordinates) -> float:
    """Great-circle distance between two points in kilometers."""

    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def is_near(
    point: HasCoordinates,
    reference: HasCoordinates,
    threshold_km: float = NEAR_ME_RADIUS_KM,
) -> bool:
    """Return True when ``point`` lies within ``threshold_km`` of ``reference``."""

    return distance_km(point, reference) <= threshold_km
