"""Helpers for consistent JSON response schema."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(message: str, data: Any | None = None, status_code: int = 200) -> Response:
    """Success response."""

    body: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> Response:
    """Error response."""

    return (
        jsonify(
            {
                "success": False,
                "message": message,
                "error": {"code": code, "message": message, "details": details},
            }
        ),
        status_code,
    )
