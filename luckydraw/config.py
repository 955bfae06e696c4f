"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_port(default: int = 5015) -> int:
    """Listen port from PORT, falling back to the default on bad input."""

    raw = os.getenv("PORT")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env(name: str, default: str | None = None) -> Any:
    """Field read from the environment when the config is instantiated."""

    return field(default_factory=lambda: os.getenv(name, default))


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments.

    Values are read when the class is instantiated, so a `.env` loaded after
    import still applies.
    """

    APP_ENV: str = _env("APP_ENV", "development")
    DB_BACKEND: str = _env("DB_BACKEND", "firestore")  # "firestore" | "mongo" | "memory"

    # Firestore backend: base64-encoded service account JSON
    FIREBASE_SERVICE_ACCOUNT_KEY: str | None = _env("FIREBASE_SERVICE_ACCOUNT_KEY")

    # Mongo backend
    MONGODB_URI: str = _env("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = _env("MONGODB_DB", "lucky_draw")
    MONGODB_TRANSACTIONS: bool = field(default_factory=lambda: _env_flag("MONGODB_TRANSACTIONS"))

    ORDERS_COLLECTION: str = _env("ORDERS_COLLECTION", "orderNumbers")
    DRAW_RESULTS_COLLECTION: str = _env("DRAW_RESULTS_COLLECTION", "drawResults")

    CORS_ORIGINS: str = _env("CORS_ORIGINS", "*")
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    PORT: int = field(default_factory=resolve_port)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Test configuration: in-memory store, no credentials needed."""

    TESTING: bool = True
    DEBUG: bool = False
    DB_BACKEND: str = "memory"


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig


def cors_origins(raw: str) -> list[str] | str:
    """Split CORS_ORIGINS into the form flask-cors expects."""

    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return "*"
    return origins
