from __future__ import annotations

from typing import Any, Mapping, Tuple

from flask import Response, jsonify, request

from ..core.enums import RejectionKind
from ..core.exceptions import DomainError, ValidationError


def error_response(err: DomainError) -> Tuple[Response, int]:
    """Structured rejection: clients switch on ``error.kind``, never on the message."""
    return jsonify({"success": False, "error": err.to_dict()}), err.status_code


def internal_error_response(message: str = "Server error") -> Tuple[Response, int]:
    return jsonify({"success": False, "error": {"kind": RejectionKind.STORAGE_ERROR.value, "message": message}}), 500


def json_body() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return data
