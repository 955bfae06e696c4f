"""MongoDB backend for the order store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pymongo import MongoClient, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.errors import PyMongoError

from luckydraw.errors import AlreadyUsedError, NotFoundError, StoreError
from luckydraw.repositories.order_repository import (
    DrawResultRecord,
    OrderRecord,
    OrderRepository,
    draw_result_from_document,
    order_from_document,
    utcnow,
)

logger = logging.getLogger(__name__)


class MongoOrderRepository(OrderRepository):
    """Orders and draw results stored with the order number as ``_id``.

    ``redeem`` gates on a conditional ``find_one_and_update`` so only one
    caller can flip ``hasPlayed``. With ``use_transactions`` the order update
    and the draw result insert commit together; otherwise a failed insert
    reverts the order update.
    """

    backend_name = "mongo"

    def __init__(
        self,
        client: MongoClient,
        database: str,
        *,
        orders_collection: str = "orderNumbers",
        draw_results_collection: str = "drawResults",
        use_transactions: bool = False,
        clock: Callable[[], Any] = utcnow,
    ) -> None:
        self._client = client
        db = client[database]
        self._orders = db[orders_collection]
        self._draw_results = db[draw_results_collection]
        self._use_transactions = use_transactions
        self._clock = clock

    def get_order(self, order_number: str) -> OrderRecord | None:
        doc = self._orders.find_one({"_id": order_number}, {"_id": 0})
        if doc is None:
            return None
        return order_from_document(order_number, doc)

    def get_draw_result(self, order_number: str) -> DrawResultRecord | None:
        doc = self._draw_results.find_one({"_id": order_number}, {"_id": 0})
        if doc is None:
            return None
        return draw_result_from_document(order_number, doc)

    def redeem(self, order_number: str, draw_result: Any) -> DrawResultRecord:
        if self._use_transactions:
            with self._client.start_session() as session:
                return session.with_transaction(
                    lambda s: self._redeem(order_number, draw_result, session=s)
                )

        record = self._mark_played(order_number, draw_result, session=None)
        try:
            self._insert_draw_result(record)
        except PyMongoError:
            logger.exception("Failed to store draw result for %s; reverting order", order_number)
            self._orders.update_one(
                {"_id": order_number, "hasPlayed": True},
                {"$set": {"hasPlayed": False}, "$unset": {"drawResult": ""}},
            )
            raise
        return record

    def _redeem(self, order_number: str, draw_result: Any, session: ClientSession) -> DrawResultRecord:
        record = self._mark_played(order_number, draw_result, session=session)
        self._insert_draw_result(record, session=session)
        return record

    def _mark_played(
        self, order_number: str, draw_result: Any, session: ClientSession | None
    ) -> DrawResultRecord:
        updated = self._orders.find_one_and_update(
            # Boolean false or no value only, the same reading order_from_document applies.
            {"_id": order_number, "hasPlayed": {"$in": [False, None]}},
            {"$set": {"hasPlayed": True, "drawResult": draw_result}},
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        if updated is None:
            existing = self._orders.find_one({"_id": order_number}, {"_id": 0}, session=session)
            if existing is None:
                raise NotFoundError(f"Order {order_number} not found")
            if order_from_document(order_number, existing).has_played:
                raise AlreadyUsedError()
            raise StoreError(f"Order {order_number} changed during redemption")

        return DrawResultRecord(order_number=order_number, draw_result=draw_result, timestamp=self._clock())

    def _insert_draw_result(self, record: DrawResultRecord, session: ClientSession | None = None) -> None:
        self._draw_results.insert_one(
            {
                "_id": record.order_number,
                "orderNumber": record.order_number,
                "drawResult": record.draw_result,
                "timestamp": record.timestamp,
            },
            session=session,
        )

    def add_orders(self, order_numbers: Iterable[str]) -> int:
        created = 0
        for order_number in order_numbers:
            result = self._orders.update_one(
                {"_id": order_number},
                {"$setOnInsert": {"orderNumber": order_number, "hasPlayed": False}},
                upsert=True,
            )
            if result.upserted_id is not None:
                created += 1
        return created
