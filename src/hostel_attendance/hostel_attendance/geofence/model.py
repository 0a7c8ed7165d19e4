from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..core.enums import BoundaryMode
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GeoPoint:
    """Decimal-degree coordinate (value type)."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class PolygonBoundary:
    """Simple closed ring; the last vertex connects back to the first."""

    points: Tuple[GeoPoint, ...]
    mode = BoundaryMode.POLYGON

    def __post_init__(self):
        if len(self.points) < 3:
            raise ValidationError("Polygon boundary needs at least 3 points")

    def to_dict(self) -> dict:
        return {"mode": self.mode.value, "points": [p.to_dict() for p in self.points]}


@dataclass(frozen=True)
class RadiusBoundary:
    center: GeoPoint
    radius_meters: float
    mode = BoundaryMode.RADIUS

    def __post_init__(self):
        if not self.radius_meters > 0:
            raise ValidationError("Radius boundary needs a positive radius")

    def to_dict(self) -> dict:
        return {"mode": self.mode.value, "center": self.center.to_dict(), "radiusMeters": self.radius_meters}


HostelBoundary = Union[PolygonBoundary, RadiusBoundary]


@dataclass(frozen=True)
class GeofenceResult:
    inside: bool
    distance_meters: Optional[float] = None
