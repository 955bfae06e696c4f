"""Logging configuration."""

from __future__ import annotations

import logging
from flask import Flask


def configure_logging(app: Flask) -> None:
    """Configure one-line process logs at LOG_LEVEL."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Store clients are chatty at INFO.
    for name in ("pymongo", "google", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)
