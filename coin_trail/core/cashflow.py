# coin_trail/core/cashflow.py

"""Monthly cashflow aggregation.

Transactions carry an unsigned amount; whether a transaction counts as
income or as an expense comes from the type of its category. The functions
here fold a year's transactions into twelve monthly buckets and derive the
year totals from those buckets.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from coin_trail.core.categorizer import categorize, index_categories
from coin_trail.core.models import (
    AnnualSummary,
    Category,
    CategoryType,
    MonthlyBucket,
    Transaction,
)

logger = logging.getLogger(__name__)

MONTHS = range(1, 13)


def aggregate(
    transactions: Iterable[Transaction],
    categories_by_id: Dict[int, Category],
    year: int,
) -> List[MonthlyBucket]:
    """Fold transactions into twelve monthly income/expense buckets.

    Parameters
    ----------
    transactions:
        Transactions of a single user, normally already restricted to *year*.
    categories_by_id:
        Mapping of category id to Category, used to resolve each
        transaction's polarity.
    year:
        Calendar year being aggregated. Transactions dated in another year
        are ignored.

    Returns
    -------
    list of MonthlyBucket
        Always twelve buckets ordered January to December, including months
        without any activity.
    """
    buckets = [MonthlyBucket(month=month) for month in MONTHS]

    for tx in transactions:
        if tx.transaction_date.year != year:
            logger.debug(
                "Skipping transaction %s dated %s outside %s",
                tx.id,
                tx.transaction_date.isoformat(),
                year,
            )
            continue

        category = categorize(tx, categories_by_id)
        if category is None:
            logger.warning(
                "Data integrity: transaction %s references unknown category %s; "
                "excluded from cashflow totals",
                tx.id,
                tx.category_id,
            )
            continue

        bucket = buckets[tx.transaction_date.month - 1]
        if category.type == CategoryType.INCOME:
            bucket.income += tx.amount
        elif category.type == CategoryType.EXPENSE:
            bucket.expenses += tx.amount

    return buckets


def summarize(buckets: Iterable[MonthlyBucket]) -> AnnualSummary:
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    for bucket in buckets:
        total_income += bucket.income
        total_expenses += bucket.expenses
    return AnnualSummary(total_income=total_income, total_expenses=total_expenses)


def build_cashflow(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    year: int,
) -> Tuple[List[MonthlyBucket], AnnualSummary]:
    """Aggregate a year's transactions and derive the year summary."""
    buckets = aggregate(transactions, index_categories(categories), year)
    return buckets, summarize(buckets)
