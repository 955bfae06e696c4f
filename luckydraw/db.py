"""Order store construction and per-app wiring.

The store client is built once per application and handed to the
RedemptionService; request handlers reach both through ``app.extensions``.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from typing import Any

from flask import Flask, current_app

from luckydraw.errors import ConfigurationError
from luckydraw.repositories.order_repository import InMemoryOrderRepository, OrderRepository
from luckydraw.services.redemption_service import RedemptionService

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "luckydraw"


def decode_service_account(raw: str | None) -> dict[str, Any]:
    """Decode a base64-encoded service account JSON document."""

    if not raw:
        raise ConfigurationError("Firebase service account key not found in environment variables.")

    try:
        payload = json.loads(base64.b64decode(raw.strip(), validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Firebase service account key could not be decoded: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError("Firebase service account key must decode to a JSON object.")
    return payload


def _create_firestore_store(config: Mapping[str, Any]) -> OrderRepository:
    service_account = decode_service_account(config.get("FIREBASE_SERVICE_ACCOUNT_KEY"))

    import firebase_admin
    from firebase_admin import credentials, firestore

    from luckydraw.repositories.firestore_order_repository import FirestoreOrderRepository

    try:
        fb_app = firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        try:
            cert = credentials.Certificate(service_account)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid Firebase service account: {exc}") from exc
        fb_app = firebase_admin.initialize_app(cert, name=FIREBASE_APP_NAME)

    return FirestoreOrderRepository(
        firestore.client(app=fb_app),
        orders_collection=str(config["ORDERS_COLLECTION"]),
        draw_results_collection=str(config["DRAW_RESULTS_COLLECTION"]),
    )


def _create_mongo_store(config: Mapping[str, Any]) -> OrderRepository:
    from pymongo import MongoClient

    from luckydraw.repositories.mongo_order_repository import MongoOrderRepository

    return MongoOrderRepository(
        MongoClient(str(config["MONGODB_URI"])),
        str(config["MONGODB_DB"]),
        orders_collection=str(config["ORDERS_COLLECTION"]),
        draw_results_collection=str(config["DRAW_RESULTS_COLLECTION"]),
        use_transactions=bool(config.get("MONGODB_TRANSACTIONS")),
    )


def create_order_store(config: Mapping[str, Any]) -> OrderRepository:
    """Build the order store selected by DB_BACKEND."""

    backend = str(config.get("DB_BACKEND") or "firestore").lower().strip()
    if backend == "firestore":
        return _create_firestore_store(config)
    if backend == "mongo":
        return _create_mongo_store(config)
    if backend == "memory":
        return InMemoryOrderRepository()
    raise ConfigurationError(f"Unsupported DB_BACKEND: {backend!r}")


def init_store(app: Flask, store: OrderRepository | None = None) -> None:
    """Attach the order store and redemption service to the app."""

    if store is None:
        store = create_order_store(app.config)

    app.extensions["order_store"] = store
    app.extensions["redemption_service"] = RedemptionService(store)
    logger.info("Order store ready (backend=%s)", store.backend_name)


def get_order_store() -> OrderRepository:
    """Get the current app's order store."""

    store: OrderRepository | None = current_app.extensions.get("order_store")
    if store is None:
        raise RuntimeError("Order store not initialized")
    return store


def get_redemption_service() -> RedemptionService:
    """Get the current app's redemption service."""

    service: RedemptionService | None = current_app.extensions.get("redemption_service")
    if service is None:
        raise RuntimeError("Redemption service not initialized")
    return service
