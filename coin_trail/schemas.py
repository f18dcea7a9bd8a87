# coin_trail/schemas.py
from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from coin_trail.core.models import CategoryType

DESCRIPTION_MIN = 3
DESCRIPTION_MAX = 300
AMOUNT_MAX = Decimal("9999999999.99")
AMOUNT_CENTS = Decimal("0.01")


class TransactionIn(BaseModel):
    """Incoming new-transaction form.

    Validate with ``TransactionIn.model_validate(data, context={"today": ...})``
    to pin the date used for the future-date check.
    """

    amount: Decimal
    transaction_date: date
    description: str
    category_id: Optional[int] = Field(default=None, validate_default=True)
    transaction_type: Optional[CategoryType] = None

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise PydanticCustomError("amount_not_positive", "Amount must be greater than zero")
        if value > AMOUNT_MAX:
            raise PydanticCustomError("amount_too_large", "Amount must be at most 9,999,999,999.99")
        if value != value.quantize(AMOUNT_CENTS):
            raise PydanticCustomError("amount_precision", "Amount can have at most 2 decimal places")
        return value

    @field_validator("transaction_date")
    @classmethod
    def _date_not_in_future(cls, value: date, info: ValidationInfo) -> date:
        today = (info.context or {}).get("today") or date.today()
        if value > today + timedelta(days=1):
            raise PydanticCustomError("date_in_future", "Transaction date cannot be in the future")
        return value

    @field_validator("description")
    @classmethod
    def _description_length(cls, value: str) -> str:
        if len(value) < DESCRIPTION_MIN:
            raise PydanticCustomError(
                "description_too_short",
                "Description must contain at least 3 characters",
            )
        if len(value) > DESCRIPTION_MAX:
            raise PydanticCustomError(
                "description_too_long",
                "Description must contain at most 300 characters",
            )
        return value

    @field_validator("category_id")
    @classmethod
    def _category_selected(cls, value: Optional[int]) -> Optional[int]:
        if value is None or value <= 0:
            raise PydanticCustomError("category_missing", "Please select a category")
        return value


def first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid transaction"
    return errors[0]["msg"]
