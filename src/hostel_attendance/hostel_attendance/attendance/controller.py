from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, internal_error_response
from ..common.datetime_utils import today_local
from ..common.validators import require_date
from ..core.exceptions import DomainError, ValidationError
from ..core.logging import get_logger
from ..container import Container
from .model import CheckInRequest

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    def _records(records):
        return jsonify([r.to_dict() for r in records]), 200

    @app.route("/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        """Verify and record one check-in (duplicate -> geofence -> face -> commit)."""
        try:
            check_in = CheckInRequest.from_json(request.get_json(silent=True))
            record = container.verification.check_in(check_in)
            return jsonify(record.to_dict()), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unexpected failure while marking attendance")
            return internal_error_response()

    @app.route("/attendance/check/<subject_id>/<date_s>", methods=["GET"], endpoint="check_attendance")
    def check_attendance(subject_id: str, date_s: str):
        try:
            marked, record = container.attendance_service.check(subject_id, require_date(date_s, "date"))
            return jsonify({"marked": marked, "attendance": record.to_dict() if record else None}), 200
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/subject/<subject_id>", methods=["GET"], endpoint="subject_attendance")
    def subject_attendance(subject_id: str):
        try:
            limit = request.args.get("limit", type=int)
            if limit is not None and limit <= 0:
                raise ValidationError("limit must be positive")
            return _records(container.attendance_service.history(subject_id, limit=limit))
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/date/<date_s>", methods=["GET"], endpoint="date_attendance")
    def date_attendance(date_s: str):
        try:
            return _records(container.attendance_service.for_date(require_date(date_s, "date")))
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/today", methods=["GET"], endpoint="today_attendance")
    def today_attendance():
        try:
            return _records(container.attendance_service.today())
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/stats/<subject_id>", methods=["GET"], endpoint="subject_attendance_stats")
    def subject_attendance_stats(subject_id: str):
        try:
            return jsonify(container.attendance_service.stats(subject_id).to_dict()), 200
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/subject/<subject_id>/date/<date_s>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(subject_id: str, date_s: str):
        """Administrative erasure (also used to reset test devices)."""
        try:
            deleted = container.attendance_service.delete(subject_id, require_date(date_s, "date"))
            return jsonify({"message": "Attendance deleted", "deletedCount": deleted}), 200
        except DomainError as e:
            return error_response(e)

    @app.route("/attendance/today/<subject_id>", methods=["DELETE"], endpoint="delete_today_attendance")
    def delete_today_attendance(subject_id: str):
        try:
            deleted = container.attendance_service.delete(subject_id, today_local())
            return jsonify({"message": "Attendance deleted", "deletedCount": deleted}), 200
        except DomainError as e:
            return error_response(e)
