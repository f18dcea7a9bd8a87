# coin_trail/actions.py

"""Create and delete actions behind the transaction pages.

Both actions take the signed-in user explicitly and report their outcome as
an :class:`~coin_trail.errors.ActionResult`; nothing raises back into the
page handlers.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Mapping, Optional

from pydantic import ValidationError

from coin_trail import database
from coin_trail.errors import ActionResult, ErrorKind
from coin_trail.schemas import TransactionIn, first_error_message

logger = logging.getLogger(__name__)


def create_transaction(
    db_path: str,
    user_id: Optional[int],
    data: Mapping[str, object],
    today: Optional[date] = None,
) -> ActionResult:
    if user_id is None:
        return ActionResult.failure(ErrorKind.UNAUTHORIZED, "Unauthorized")

    try:
        form = TransactionIn.model_validate(dict(data), context={"today": today or date.today()})
    except ValidationError as exc:
        return ActionResult.failure(ErrorKind.VALIDATION, first_error_message(exc))

    try:
        category = database.get_category(db_path, form.category_id)
        if category is None:
            return ActionResult.failure(ErrorKind.VALIDATION, "Please select a category")
        if form.transaction_type is not None and category.type != form.transaction_type:
            return ActionResult.failure(
                ErrorKind.VALIDATION, "Category does not match the transaction type"
            )

        new_id = database.insert_transaction(
            db_path,
            {
                "user_id": user_id,
                "amount": form.amount,
                "category_id": form.category_id,
                "transaction_date": form.transaction_date,
                "description": form.description,
            },
        )
    except sqlite3.Error:
        logger.exception("Failed to create transaction for user %s", user_id)
        return ActionResult.failure(ErrorKind.STORAGE, "Failed to create transaction")

    logger.info("User %s created transaction %s", user_id, new_id)
    return ActionResult.success(id=new_id)


def delete_transaction(db_path: str, user_id: Optional[int], transaction_id: int) -> ActionResult:
    if user_id is None:
        return ActionResult.failure(ErrorKind.UNAUTHORIZED, "Unauthorized")

    try:
        deleted = database.delete_transaction(db_path, transaction_id, user_id)
    except sqlite3.Error:
        logger.exception("Failed to delete transaction %s for user %s", transaction_id, user_id)
        return ActionResult.failure(ErrorKind.STORAGE, "Failed to delete transaction")

    if not deleted:
        return ActionResult.failure(ErrorKind.NOT_FOUND, "Transaction not found")

    logger.info("User %s deleted transaction %s", user_id, transaction_id)
    return ActionResult.success(id=transaction_id)
