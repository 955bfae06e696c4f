"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Order number not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class AlreadyUsedError(AppError):
    """The order number's single draw attempt has been consumed."""

    def __init__(self, message: str = "You have used your chance.", details: Any | None = None) -> None:
        super().__init__(code="already_used", message=message, status_code=400, details=details)


class StoreError(AppError):
    """Underlying document store failure."""

    def __init__(self, message: str = "Store error", details: Any | None = None) -> None:
        super().__init__(code="store_error", message=message, status_code=500, details=details)


class ConfigurationError(RuntimeError):
    """Order store cannot be built from configuration. Fatal at startup."""
