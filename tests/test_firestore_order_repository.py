"""Firestore backend tests with mocked document references."""

from __future__ import annotations

import datetime as dt
from unittest.mock import MagicMock, Mock

import pytest
from google.api_core.exceptions import AlreadyExists

from luckydraw.errors import AlreadyUsedError, NotFoundError
from luckydraw.repositories import firestore_order_repository as fs_repo
from luckydraw.repositories.firestore_order_repository import (
    FirestoreOrderRepository,
    _redeem_in_transaction,
)


def _snapshot(data: dict | None) -> Mock:
    snapshot = Mock(exists=data is not None)
    snapshot.to_dict.return_value = data
    return snapshot


def test_transaction_writes_order_and_result():
    transaction, order_ref, result_ref = Mock(), Mock(), Mock()
    order_ref.get.return_value = _snapshot({"orderNumber": "A100", "hasPlayed": False})

    _redeem_in_transaction(transaction, order_ref, result_ref, "A100", "PRIZE1")

    order_ref.get.assert_called_once_with(transaction=transaction)
    transaction.update.assert_called_once_with(order_ref, {"hasPlayed": True, "drawResult": "PRIZE1"})
    transaction.create.assert_called_once_with(
        result_ref,
        {
            "orderNumber": "A100",
            "drawResult": "PRIZE1",
            "timestamp": fs_repo.firestore.SERVER_TIMESTAMP,
        },
    )


def test_transaction_rejects_played_order():
    transaction, order_ref, result_ref = Mock(), Mock(), Mock()
    order_ref.get.return_value = _snapshot({"hasPlayed": True, "drawResult": "PRIZE1"})

    with pytest.raises(AlreadyUsedError):
        _redeem_in_transaction(transaction, order_ref, result_ref, "A100", "PRIZE2")

    transaction.update.assert_not_called()
    transaction.create.assert_not_called()


def test_transaction_rejects_missing_order():
    transaction, order_ref, result_ref = Mock(), Mock(), Mock()
    order_ref.get.return_value = _snapshot(None)

    with pytest.raises(NotFoundError):
        _redeem_in_transaction(transaction, order_ref, result_ref, "Z999", "PRIZE1")

    transaction.create.assert_not_called()


@pytest.fixture
def collections():
    return {"orderNumbers": MagicMock(), "drawResults": MagicMock()}


@pytest.fixture
def client(collections):
    client = MagicMock()
    client.collection.side_effect = collections.__getitem__
    return client


def test_get_order_uses_document_key(client, collections):
    doc_ref = collections["orderNumbers"].document.return_value
    doc_ref.get.return_value = _snapshot({"hasPlayed": False})

    order = FirestoreOrderRepository(client).get_order("A100")

    collections["orderNumbers"].document.assert_called_once_with("A100")
    assert order.order_number == "A100"
    assert order.has_played is False


def test_get_order_missing(client, collections):
    collections["orderNumbers"].document.return_value.get.return_value = _snapshot(None)

    assert FirestoreOrderRepository(client).get_order("Z999") is None


def test_redeem_runs_transaction_and_reads_back(client, collections, monkeypatch):
    calls = []

    def transactional(func):
        def run(transaction, *args):
            calls.append((transaction, args))

        return run

    monkeypatch.setattr(fs_repo.firestore, "transactional", transactional)
    stamp = dt.datetime(2026, 1, 1, tzinfo=dt.timezone.utc)
    collections["drawResults"].document.return_value.get.return_value = _snapshot(
        {"orderNumber": "A100", "drawResult": "PRIZE1", "timestamp": stamp}
    )

    record = FirestoreOrderRepository(client).redeem("A100", "PRIZE1")

    assert calls[0][0] is client.transaction.return_value
    assert calls[0][1][2:] == ("A100", "PRIZE1")
    assert record.draw_result == "PRIZE1"
    assert record.timestamp == stamp


def test_add_orders_skips_existing(client, collections):
    doc_ref = collections["orderNumbers"].document.return_value
    doc_ref.create.side_effect = [None, AlreadyExists("exists")]

    created = FirestoreOrderRepository(client).add_orders(["A100", "B200"])

    assert created == 1
    doc_ref.create.assert_any_call({"orderNumber": "A100", "hasPlayed": False})
