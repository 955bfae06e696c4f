"""Lucky draw redemption service (Flask application package)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from flask import Flask

try:
    from dotenv import load_dotenv
except Exception:  # pragma: no cover
    load_dotenv = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from luckydraw.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def create_app(
    overrides: Mapping[str, Any] | None = None,
    store: OrderRepository | None = None,
) -> Flask:
    """Application factory.

    Args:
        overrides: Config values applied on top of the environment config.
        store: Pre-built order store; built from config when omitted.

    Returns:
        Configured Flask application.

    Raises:
        SystemExit: the order store cannot be initialized (e.g. missing
            service account credentials).
    """
    if load_dotenv is not None:
        load_dotenv()

    from flask_cors import CORS

    from luckydraw.config import cors_origins, get_config
    from luckydraw.db import init_store
    from luckydraw.error_handlers import register_error_handlers
    from luckydraw.errors import ConfigurationError
    from luckydraw.logging_config import configure_logging
    from luckydraw.routes.health import health_bp
    from luckydraw.routes.redemption import redemption_bp

    app = Flask(__name__)
    app.config.from_object(get_config()())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    try:
        init_store(app, store)
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    register_error_handlers(app)
    CORS(app, resources={r"/*": {"origins": cors_origins(str(app.config.get("CORS_ORIGINS", "*")))}})

    app.register_blueprint(health_bp)
    app.register_blueprint(redemption_bp)

    return app
