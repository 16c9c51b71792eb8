"""Geofence evaluation.

The default distance is a flat-earth approximation: Euclidean distance in
degree space scaled by a fixed meters-per-degree factor. It is only accurate
near the equator and for small distances. ``haversine_meters`` is available
through ``GEOFENCE_DISTANCE=haversine`` for sites where that matters.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..core.constants import METERS_PER_DEGREE
from ..core.enums import DistanceMethod

EARTH_RADIUS_METERS = 6_371_000


@dataclass(frozen=True)
class Coordinates:
    lng: float
    lat: float

    @classmethod
    def from_geojson(cls, coordinates: Sequence[float]) -> "Coordinates":
        """Build from a GeoJSON ``[lng, lat]`` pair."""
        return cls(lng=float(coordinates[0]), lat=float(coordinates[1]))

    def to_geojson(self) -> list[float]:
        return [self.lng, self.lat]


@dataclass(frozen=True)
class GeofencePolicy:
    center: Coordinates
    radius_meters: float
    distance_method: DistanceMethod = DistanceMethod.PLANAR

    def contains(self, point: Coordinates) -> bool:
        return is_within_fence(point, self.center, self.radius_meters, method=self.distance_method)


def planar_meters(point: Coordinates, center: Coordinates) -> float:
    return math.hypot(point.lng - center.lng, point.lat - center.lat) * METERS_PER_DEGREE


def haversine_meters(point: Coordinates, center: Coordinates) -> float:
    phi1 = math.radians(center.lat)
    phi2 = math.radians(point.lat)
    d_phi = math.radians(point.lat - center.lat)
    d_lambda = math.radians(point.lng - center.lng)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def is_within_fence(
    point: Coordinates,
    center: Coordinates,
    radius_meters: float,
    *,
    method: DistanceMethod = DistanceMethod.PLANAR,
) -> bool:
    """True when ``point`` lies inside the fence (boundary included)."""
    if method == DistanceMethod.HAVERSINE:
        distance = haversine_meters(point, center)
    else:
        distance = planar_meters(point, center)
    return distance <= radius_meters
