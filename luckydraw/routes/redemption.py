"""Redemption routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from luckydraw.db import get_redemption_service
from luckydraw.schemas.redemption import CheckOrderNumberSchema, RecordDrawResultSchema
from luckydraw.services.redemption_service import DRAW_RECORDED, ORDER_VALID
from luckydraw.utils.responses import ok

redemption_bp = Blueprint("redemption", __name__)

_check_schema = CheckOrderNumberSchema()
_record_schema = RecordDrawResultSchema()


@redemption_bp.post("/check-order-number")
def check_order_number():
    """Step 1: confirm the order number may still be played."""

    payload = request.get_json(silent=True) or {}
    data = _check_schema.load(payload)

    get_redemption_service().validate(data["orderNumber"])
    return ok(ORDER_VALID)


@redemption_bp.post("/record-draw-result")
def record_draw_result():
    """Step 2: consume the order number and store the draw result."""

    payload = request.get_json(silent=True) or {}
    data = _record_schema.load(payload)

    get_redemption_service().record(data["orderNumber"], data["drawResult"])
    return ok(DRAW_RECORDED)
