"""Health check routes."""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from luckydraw.db import get_order_store
from luckydraw.utils.responses import ok

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    return ok("ok", data={"status": "ok", "backend": get_order_store().backend_name})


@health_bp.get("/keep-alive")
def keep_alive() -> Response:
    """Wake-up ping so idle hosting does not put the service to sleep."""

    logger.info("Received a keep-alive ping")
    return Response("Server is alive", mimetype="text/plain")
