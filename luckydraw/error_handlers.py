"""Centralized error handlers."""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask
from google.api_core.exceptions import GoogleAPIError
from marshmallow import ValidationError as MarshmallowValidationError
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from luckydraw.errors import AppError, StoreError, ValidationError
from luckydraw.utils.responses import fail

logger = logging.getLogger(__name__)


def _flatten_messages(messages: Any) -> list[str]:
    if isinstance(messages, str):
        return [messages]
    if isinstance(messages, dict):
        return [m for value in messages.values() for m in _flatten_messages(value)]
    if isinstance(messages, (list, tuple)):
        return [m for value in messages for m in _flatten_messages(value)]
    return [str(messages)]


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return fail(exc.code, exc.message, exc.status_code, exc.details)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        # exc.messages is a dict of field -> list[str]
        summary = " ".join(dict.fromkeys(_flatten_messages(exc.messages))) or "Validation error"
        wrapped = ValidationError(message=summary, details=exc.messages)
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(PyMongoError)
    @app.errorhandler(GoogleAPIError)
    def _handle_store_error(exc: Exception):
        logger.exception("Order store failure")
        wrapped = StoreError(message=str(exc) or type(exc).__name__)
        return fail(wrapped.code, wrapped.message, wrapped.status_code)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail("not_found", "Not found", 404)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return fail("internal_error", str(exc) or "Internal server error", 500)
