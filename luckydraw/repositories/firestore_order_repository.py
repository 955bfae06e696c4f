"""Cloud Firestore backend for the order store."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists

from luckydraw.errors import AlreadyUsedError, NotFoundError, StoreError
from luckydraw.repositories.order_repository import (
    DrawResultRecord,
    OrderRecord,
    OrderRepository,
    draw_result_from_document,
    order_from_document,
)

logger = logging.getLogger(__name__)


def _redeem_in_transaction(
    transaction: Any,
    order_ref: Any,
    result_ref: Any,
    order_number: str,
    draw_result: Any,
) -> None:
    """Check and consume the order inside one Firestore transaction.

    Raising aborts the transaction without writing anything.
    """

    snapshot = order_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise NotFoundError(f"Order {order_number} not found")

    order = order_from_document(order_number, snapshot.to_dict())
    if order.has_played:
        raise AlreadyUsedError()

    transaction.update(order_ref, {"hasPlayed": True, "drawResult": draw_result})
    transaction.create(
        result_ref,
        {
            "orderNumber": order_number,
            "drawResult": draw_result,
            "timestamp": firestore.SERVER_TIMESTAMP,
        },
    )


class FirestoreOrderRepository(OrderRepository):
    """Orders and draw results stored with the order number as document id."""

    backend_name = "firestore"

    def __init__(
        self,
        client: Any,
        *,
        orders_collection: str = "orderNumbers",
        draw_results_collection: str = "drawResults",
    ) -> None:
        self._client = client
        self._orders = client.collection(orders_collection)
        self._draw_results = client.collection(draw_results_collection)

    def get_order(self, order_number: str) -> OrderRecord | None:
        snapshot = self._orders.document(order_number).get()
        if not snapshot.exists:
            return None
        return order_from_document(order_number, snapshot.to_dict())

    def get_draw_result(self, order_number: str) -> DrawResultRecord | None:
        snapshot = self._draw_results.document(order_number).get()
        if not snapshot.exists:
            return None
        return draw_result_from_document(order_number, snapshot.to_dict())

    def redeem(self, order_number: str, draw_result: Any) -> DrawResultRecord:
        order_ref = self._orders.document(order_number)
        result_ref = self._draw_results.document(order_number)

        run = firestore.transactional(_redeem_in_transaction)
        run(self._client.transaction(), order_ref, result_ref, order_number, draw_result)

        # Read back to pick up the server-assigned timestamp.
        stored = self.get_draw_result(order_number)
        if stored is None:
            raise StoreError(f"Draw result for {order_number} missing after commit")
        return stored

    def add_orders(self, order_numbers: Iterable[str]) -> int:
        created = 0
        for order_number in order_numbers:
            try:
                self._orders.document(order_number).create({"orderNumber": order_number, "hasPlayed": False})
            except AlreadyExists:
                logger.debug("Order %s already exists; skipping", order_number)
                continue
            created += 1
        return created
