from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import (
    DomainError,
    InvalidStateTransition,
    NotFound,
    OverlappingLeave,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (NotFound, 404),
    (OverlappingLeave, 409),
    (InvalidStateTransition, 409),
    (ValidationError, 400),
    (DomainError, 400),
)


def status_for(error: Exception) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def ok(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("JSON object body required")
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        extra = {}
        if isinstance(e, OverlappingLeave) and e.conflicting_ids:
            extra["conflicting_ids"] = list(e.conflicting_ids)
        return fail(str(e), status_for(e), **extra)

    @app.errorhandler(StorageError)
    def _storage_error(e: StorageError):
        logger.error("Storage failure: %s", e)
        return fail("Storage unavailable", 503)
