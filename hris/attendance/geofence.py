"""Great-circle geofence checks for clock-in scans."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

EARTH_RADIUS_METERS = 6_371_000.0
# Stored coordinates carry 7 decimal places (~1 cm); compare at millimetres.
DISTANCE_PRECISION = 3


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in meters between two WGS84 points."""
    phi1 = math.radians(float(lat1))
    phi2 = math.radians(float(lat2))
    delta_phi = math.radians(float(lat2) - float(lat1))
    delta_lambda = math.radians(float(lng2) - float(lng1))

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def within_geofence(
    lat1: float,
    lng1: float,
    lat2: float | None,
    lng2: float | None,
    radius_meters: float,
) -> bool:
    """Return True when (lat1, lng1) lies inside the circle, boundary included.

    A fence without a center is unrestricted.
    """
    if lat2 is None or lng2 is None:
        return True
    distance = round(distance_meters(lat1, lng1, lat2, lng2), DISTANCE_PRECISION)
    return distance <= float(radius_meters)


@dataclass(frozen=True)
class GeofenceMatch:
    location: Any | None = None
    distance_meters: float | None = None
    nearest: Any | None = None
    nearest_distance_meters: float | None = None

    @property
    def matched(self) -> bool:
        return self.location is not None


def match_location(
    latitude: float,
    longitude: float,
    locations: Iterable[Any],
    *,
    default_radius_meters: int = 100,
) -> GeofenceMatch:
    """Check the point against every location and accept the first match.

    Locations are duck-typed: ``latitude``, ``longitude`` and ``geo_radius``.
    When nothing matches, the nearest location and its distance are reported
    so the caller can tell the user how far off they are.
    """
    nearest = None
    nearest_distance = None
    for location in locations:
        lat = getattr(location, "latitude", None)
        lng = getattr(location, "longitude", None)
        if lat is None or lng is None:
            return GeofenceMatch(location=location)
        radius = getattr(location, "geo_radius", None) or default_radius_meters
        distance = distance_meters(latitude, longitude, lat, lng)
        if within_geofence(latitude, longitude, lat, lng, radius):
            return GeofenceMatch(location=location, distance_meters=distance)
        if nearest_distance is None or distance < nearest_distance:
            nearest, nearest_distance = location, distance
    return GeofenceMatch(nearest=nearest, nearest_distance_meters=nearest_distance)
