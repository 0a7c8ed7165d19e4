from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, internal_error_response, json_body
from ..core.exceptions import DomainError
from ..core.logging import get_logger
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/subjects/<subject_id>/face", methods=["GET"], endpoint="face_status")
    def face_status(subject_id: str):
        try:
            enrolled = container.enrollment_service.is_enrolled(subject_id)
            return jsonify({"subjectId": subject_id, "enrolled": enrolled}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Face status lookup failed for %s", subject_id)
            return internal_error_response()

    @app.route("/subjects/<subject_id>/face", methods=["POST"], endpoint="enroll_face")
    def enroll_face(subject_id: str):
        try:
            body = json_body()
            dims = container.enrollment_service.enroll(subject_id, body.get("photo") or body.get("image"))
            return jsonify({"success": True, "subjectId": subject_id, "dimensions": dims}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Face enrollment failed for %s", subject_id)
            return internal_error_response("Face registration failed")
