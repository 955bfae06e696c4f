"""Repository layer for order and draw result persistence.

Every backend keys both collections by the order number itself, so lookups
are always direct key reads. ``redeem`` is the only write the service makes
and each backend implements it as one atomic conditional write.
"""

from __future__ import annotations

import datetime as dt
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from marshmallow import ValidationError as MarshmallowValidationError

from luckydraw.errors import AlreadyUsedError, NotFoundError, StoreError
from luckydraw.schemas.redemption import DrawResultRecordSchema, OrderRecordSchema

_order_schema = OrderRecordSchema()
_draw_result_schema = DrawResultRecordSchema()


@dataclass(frozen=True)
class OrderRecord:
    order_number: str
    has_played: bool = False
    draw_result: Any | None = None


@dataclass(frozen=True)
class DrawResultRecord:
    order_number: str
    draw_result: Any
    timestamp: dt.datetime | None = None


def order_from_document(order_number: str, doc: Mapping[str, Any] | None) -> OrderRecord:
    """Build an OrderRecord from a stored document keyed by ``order_number``."""

    try:
        data = _order_schema.load({**(doc or {}), "orderNumber": order_number})
    except MarshmallowValidationError as exc:
        raise StoreError(f"Malformed order document {order_number!r}", details=exc.messages) from exc
    return OrderRecord(
        order_number=data["orderNumber"],
        has_played=bool(data["hasPlayed"]),
        draw_result=data.get("drawResult"),
    )


def draw_result_from_document(order_number: str, doc: Mapping[str, Any] | None) -> DrawResultRecord:
    """Build a DrawResultRecord from a stored document keyed by ``order_number``."""

    try:
        data = _draw_result_schema.load({**(doc or {}), "orderNumber": order_number})
    except MarshmallowValidationError as exc:
        raise StoreError(f"Malformed draw result document {order_number!r}", details=exc.messages) from exc
    return DrawResultRecord(
        order_number=data["orderNumber"],
        draw_result=data["drawResult"],
        timestamp=data.get("timestamp"),
    )


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class OrderRepository(ABC):
    """Store accessor for order numbers and their draw results."""

    backend_name = "abstract"

    @abstractmethod
    def get_order(self, order_number: str) -> OrderRecord | None:
        """Direct key lookup of an order. None when absent."""

    @abstractmethod
    def get_draw_result(self, order_number: str) -> DrawResultRecord | None:
        """Direct key lookup of a draw result. None when absent."""

    @abstractmethod
    def redeem(self, order_number: str, draw_result: Any) -> DrawResultRecord:
        """Atomically consume the order's draw attempt and store its result.

        Raises:
            NotFoundError: no order with this number.
            AlreadyUsedError: the order has already been played.
        """

    @abstractmethod
    def add_orders(self, order_numbers: Iterable[str]) -> int:
        """Create unplayed orders, leaving existing ones untouched.

        Returns:
            Number of orders created.
        """


class InMemoryOrderRepository(OrderRepository):
    """Process-local store for development and tests."""

    backend_name = "memory"

    def __init__(
        self,
        order_numbers: Iterable[str] = (),
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._orders: dict[str, dict[str, Any]] = {}
        self._draw_results: dict[str, dict[str, Any]] = {}
        self.add_orders(order_numbers)

    def get_order(self, order_number: str) -> OrderRecord | None:
        with self._lock:
            doc = self._orders.get(order_number)
            if doc is None:
                return None
            return order_from_document(order_number, dict(doc))

    def get_draw_result(self, order_number: str) -> DrawResultRecord | None:
        with self._lock:
            doc = self._draw_results.get(order_number)
            if doc is None:
                return None
            return draw_result_from_document(order_number, dict(doc))

    def redeem(self, order_number: str, draw_result: Any) -> DrawResultRecord:
        with self._lock:
            doc = self._orders.get(order_number)
            if doc is None:
                raise NotFoundError(f"Order {order_number} not found")
            if order_from_document(order_number, doc).has_played:
                raise AlreadyUsedError()

            timestamp = self._clock()
            doc.update({"hasPlayed": True, "drawResult": draw_result})
            self._draw_results[order_number] = {
                "orderNumber": order_number,
                "drawResult": draw_result,
                "timestamp": timestamp,
            }
            return DrawResultRecord(order_number=order_number, draw_result=draw_result, timestamp=timestamp)

    def add_orders(self, order_numbers: Iterable[str]) -> int:
        created = 0
        with self._lock:
            for order_number in order_numbers:
                if order_number in self._orders:
                    continue
                self._orders[order_number] = {"orderNumber": order_number, "hasPlayed": False}
                created += 1
        return created
