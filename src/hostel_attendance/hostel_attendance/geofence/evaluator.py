"""Point-in-boundary tests for hostel geofences.

Pure functions only: no I/O and no shared state, so they are safe to call from
any number of request threads.
"""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeofenceResult, GeoPoint, HostelBoundary, PolygonBoundary, RadiusBoundary


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = radians(a.latitude)
    phi2 = radians(b.latitude)
    d_phi = radians(b.latitude - a.latitude)
    d_lambda = radians(b.longitude - a.longitude)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """Even-odd ray casting with longitude as X and latitude as Y.

    Points lying exactly on an edge or vertex may land on either side.
    """
    x = point.longitude
    y = point.latitude
    inside = False

    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].longitude, polygon[i].latitude
        xj, yj = polygon[j].longitude, polygon[j].latitude

        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i

    return inside


def evaluate(point: GeoPoint, boundary: HostelBoundary) -> GeofenceResult:
    if isinstance(boundary, RadiusBoundary):
        distance = haversine_meters(point, boundary.center)
        return GeofenceResult(inside=distance <= boundary.radius_meters, distance_meters=distance)

    if isinstance(boundary, PolygonBoundary):
        return GeofenceResult(inside=point_in_polygon(point, boundary.points))

    raise TypeError(f"Unsupported boundary type: {type(boundary)!r}")
