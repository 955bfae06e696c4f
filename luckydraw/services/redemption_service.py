"""Service layer for order number redemption."""

from __future__ import annotations

import logging
from typing import Any

from luckydraw.errors import AlreadyUsedError, NotFoundError, ValidationError
from luckydraw.repositories.order_repository import DrawResultRecord, OrderRecord, OrderRepository
from luckydraw.schemas.redemption import DRAW_RESULT_REQUIRED, ORDER_NUMBER_REQUIRED

logger = logging.getLogger(__name__)

ORDER_VALID = "Order number is valid. Proceed with the draw."
DRAW_RECORDED = "Draw result recorded successfully."

UNQUALIFIED_ORDER = (
    "Please input a qualified order number. "
    "Contact your sales representative for more information."
)
MISSING_ORDER = "Order number does not exist."
CHANCE_USED = "You have used your chance."
CHANCE_ALREADY_USED = "You have already used your chance."


class RedemptionService:
    """Validate and redeem order numbers against an order store."""

    def __init__(self, store: OrderRepository) -> None:
        self._store = store

    @property
    def store(self) -> OrderRepository:
        return self._store

    def validate(self, order_number: str) -> OrderRecord:
        """Check that an order number exists and has not been played. No side effects."""

        if not order_number:
            raise ValidationError(ORDER_NUMBER_REQUIRED)

        order = self._store.get_order(order_number)
        if order is None:
            logger.info("Rejected unknown order number %s", order_number)
            raise NotFoundError(UNQUALIFIED_ORDER, details={"orderNumber": order_number})
        if order.has_played:
            logger.info("Rejected played order number %s", order_number)
            raise AlreadyUsedError(CHANCE_USED, details={"orderNumber": order_number})
        return order

    def record(self, order_number: str, draw_result: Any) -> DrawResultRecord:
        """Consume the order's single draw attempt and persist its result."""

        if not order_number:
            raise ValidationError(ORDER_NUMBER_REQUIRED)
        if draw_result is None or draw_result is False or draw_result in ("", [], {}):
            raise ValidationError(DRAW_RESULT_REQUIRED)

        try:
            record = self._store.redeem(order_number, draw_result)
        except NotFoundError as exc:
            logger.info("Rejected draw for unknown order number %s", order_number)
            raise NotFoundError(MISSING_ORDER, details={"orderNumber": order_number}) from exc
        except AlreadyUsedError as exc:
            logger.info("Rejected repeat draw for order number %s", order_number)
            raise AlreadyUsedError(CHANCE_ALREADY_USED, details={"orderNumber": order_number}) from exc

        logger.info("Recorded draw result for order number %s", order_number)
        return record
