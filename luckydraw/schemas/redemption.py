"""Marshmallow schemas for redemption requests and stored documents."""

from __future__ import annotations

import datetime as dt
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

ORDER_NUMBER_REQUIRED = "Order number is required."
DRAW_RESULT_REQUIRED = "Draw result is required."

# Firestore document ids cannot contain "/", be "." or "..", or match __.*__.
_order_number_rules = [
    validate.Length(min=1, error=ORDER_NUMBER_REQUIRED),
    validate.Length(max=256, error="Order number must be at most {max} characters."),
    validate.Regexp(r"^[^/]*$", error="Order number must not contain '/'."),
    validate.Regexp(r"^(?!\.\.?$)(?!__.*__$)", error="Order number is reserved."),
]


def _order_number_field() -> fields.Str:
    return fields.Str(
        required=True,
        validate=_order_number_rules,
        error_messages={"required": ORDER_NUMBER_REQUIRED, "null": ORDER_NUMBER_REQUIRED},
    )


def _draw_result_present(value: Any) -> None:
    # 0 is a legitimate result; the other falsy JSON values are not.
    if value is False or value in ("", [], {}):
        raise ValidationError(DRAW_RESULT_REQUIRED)


class StoredDateTime(fields.DateTime):
    """DateTime that also accepts the datetime objects store clients hand back."""

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, dt.datetime):
            return value
        return super()._deserialize(value, attr, data, **kwargs)


class StrictBoolean(fields.Boolean):
    """Boolean that only accepts real booleans, never truthy strings or numbers."""

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if not isinstance(value, bool):
            raise self.make_error("invalid", input=value)
        return value


class CheckOrderNumberSchema(Schema):
    """Validate POST /check-order-number payload."""

    class Meta:
        unknown = EXCLUDE

    orderNumber = _order_number_field()


class RecordDrawResultSchema(Schema):
    """Validate POST /record-draw-result payload."""

    class Meta:
        unknown = EXCLUDE

    orderNumber = _order_number_field()
    drawResult = fields.Raw(
        required=True,
        validate=_draw_result_present,
        error_messages={"required": DRAW_RESULT_REQUIRED, "null": DRAW_RESULT_REQUIRED},
    )


class OrderRecordSchema(Schema):
    """Shape of a stored order document."""

    class Meta:
        unknown = EXCLUDE

    orderNumber = fields.Str(required=True, validate=validate.Length(min=1))
    hasPlayed = StrictBoolean(load_default=False, allow_none=True)
    drawResult = fields.Raw(load_default=None, allow_none=True)


class DrawResultRecordSchema(Schema):
    """Shape of a stored draw result document."""

    class Meta:
        unknown = EXCLUDE

    orderNumber = fields.Str(required=True, validate=validate.Length(min=1))
    drawResult = fields.Raw(required=True)
    timestamp = StoredDateTime(load_default=None, allow_none=True)
