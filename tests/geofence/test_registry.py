import logging
from pathlib import Path

import pytest

from hostel_attendance.core.enums import BoundaryMode
from hostel_attendance.core.exceptions import ValidationError
from hostel_attendance.geofence.model import PolygonBoundary, RadiusBoundary
from hostel_attendance.geofence.registry import HostelRegistry, boundary_from_config

REPO_ROOT = Path(__file__).resolve().parents[2]

POINTS = [
    {"latitude": 11.0, "longitude": 77.0},
    {"latitude": 11.0, "longitude": 77.01},
    {"latitude": 11.01, "longitude": 77.01},
]


def test_radius_takes_precedence_when_both_modes_present(caplog):
    raw = {"points": POINTS, "center": {"latitude": 11.0, "longitude": 77.0}, "radius": 1000}

    with caplog.at_level(logging.WARNING):
        boundary = boundary_from_config("Test", raw)

    assert isinstance(boundary, RadiusBoundary)
    assert boundary.radius_meters == 1000
    assert "using radius mode" in caplog.text


def test_polygon_only_entry_builds_polygon():
    boundary = boundary_from_config("Test", {"points": POINTS})

    assert isinstance(boundary, PolygonBoundary)
    assert boundary.mode == BoundaryMode.POLYGON
    assert len(boundary.points) == 3


@pytest.mark.parametrize(
    "raw",
    [
        {"center": {"latitude": 11.0, "longitude": 77.0}, "radius": 0},
        {"center": {"latitude": 11.0, "longitude": 77.0}, "radius": -5},
        {"points": POINTS[:2]},
        {},
        {"points": [{"latitude": "x", "longitude": 1}, *POINTS]},
    ],
)
def test_invalid_entries_are_rejected_at_load(raw):
    with pytest.raises(ValidationError):
        boundary_from_config("Bad", raw)


def test_registry_serves_configured_hostels():
    registry = HostelRegistry.from_file(REPO_ROOT / "database" / "hostels.json")

    assert len(registry) == 10
    assert isinstance(registry.get("Valluvar Mens Hostel"), PolygonBoundary)
    assert isinstance(registry.get(" Kaveri Ladies Hostel "), RadiusBoundary)
    assert registry.get("Unknown Hostel") is None

    payload = registry.to_dict()
    assert payload["Kaveri Ladies Hostel"]["mode"] == "radius"
    assert payload["Kaveri Ladies Hostel"]["radiusMeters"] == 2000
