"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from luckydraw import create_app
from luckydraw.repositories.order_repository import InMemoryOrderRepository


@pytest.fixture
def store() -> InMemoryOrderRepository:
    """Fresh in-memory store seeded with one unplayed and one played order."""
    store = InMemoryOrderRepository(["A100", "B200"])
    store.redeem("B200", "PRIZE0")
    return store


@pytest.fixture
def app(store):
    return create_app({"TESTING": True, "DB_BACKEND": "memory"}, store=store)


@pytest.fixture
def client(app):
    return app.test_client()
