from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from .model import GeoPoint, HostelBoundary, PolygonBoundary, RadiusBoundary

logger = get_logger(__name__)


def _point(raw: Mapping, where: str) -> GeoPoint:
    try:
        return GeoPoint(latitude=float(raw["latitude"]), longitude=float(raw["longitude"]))
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f"Invalid coordinate in {where}") from None


def boundary_from_config(name: str, raw: Mapping) -> HostelBoundary:
    """Build the tagged boundary for one hostel entry.

    An entry carrying both ``center``/``radius`` and ``points`` resolves to radius
    mode; the choice is made here, once, so evaluation never sees both.
    """
    center = raw.get("center")
    radius = raw.get("radius", raw.get("radiusMeters"))
    points = raw.get("points") or []

    if center is not None and radius is not None:
        if points:
            logger.warning("Hostel %r defines both polygon and radius; using radius mode", name)
        try:
            radius_meters = float(radius)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid radius for hostel {name!r}") from None
        return RadiusBoundary(center=_point(center, name), radius_meters=radius_meters)

    if points:
        return PolygonBoundary(points=tuple(_point(p, name) for p in points))

    raise ValidationError(f"Hostel {name!r} has neither a polygon nor a center/radius")


class HostelRegistry:
    """Hostel name -> boundary mapping shared by server checks and clients."""

    def __init__(self, boundaries: Mapping[str, HostelBoundary]):
        self._boundaries: Dict[str, HostelBoundary] = dict(boundaries)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Mapping]) -> "HostelRegistry":
        return cls({name: boundary_from_config(name, entry) for name, entry in raw.items()})

    @classmethod
    def from_file(cls, path: str | Path) -> "HostelRegistry":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        registry = cls.from_mapping(data.get("hostels", data))
        logger.info("Loaded %d hostel boundaries from %s", len(registry), path)
        return registry

    def get(self, name: str) -> Optional[HostelBoundary]:
        return self._boundaries.get((name or "").strip())

    def names(self) -> Iterable[str]:
        return sorted(self._boundaries)

    def to_dict(self) -> dict:
        return {name: self._boundaries[name].to_dict() for name in self.names()}

    def __len__(self) -> int:
        return len(self._boundaries)
