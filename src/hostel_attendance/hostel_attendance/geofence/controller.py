from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body
from ..common.validators import optional_coordinate
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from . import evaluator
from .model import GeoPoint


def register(app: Flask, container: Container) -> None:
    @app.route("/hostels", methods=["GET"], endpoint="list_hostels")
    def list_hostels():
        """Boundary configuration for every hostel (same data the server checks against)."""
        return jsonify({"hostels": container.hostels.to_dict()}), 200

    @app.route("/hostels/<path:name>/locate", methods=["POST"], endpoint="locate_in_hostel")
    def locate_in_hostel(name: str):
        """Client-side pre-check before the user is allowed to mark attendance."""
        try:
            boundary = container.hostels.get(name)
            if boundary is None:
                raise ValidationError(f"No boundary configured for hostel '{name}'")

            body = json_body()
            lat = optional_coordinate(body.get("latitude"), "latitude", low=-90.0, high=90.0)
            lon = optional_coordinate(body.get("longitude"), "longitude", low=-180.0, high=180.0)
            if lat is None or lon is None:
                raise ValidationError("latitude and longitude are required")

            result = evaluator.evaluate(GeoPoint(latitude=lat, longitude=lon), boundary)
            return jsonify({
                "hostel": name,
                "mode": boundary.mode.value,
                "inside": result.inside,
                "distanceMeters": round(result.distance_meters, 2) if result.distance_meters is not None else None,
            }), 200
        except DomainError as e:
            return error_response(e)
