# coin_trail/core/models.py
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass
class Category:
    id: int
    name: str
    type: CategoryType


@dataclass
class Transaction:
    id: int
    user_id: int
    amount: Decimal
    category_id: int
    transaction_date: date
    description: str


@dataclass
class User:
    id: int
    username: str
    password_hash: str


@dataclass
class MonthlyBucket:
    month: int
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")


@dataclass
class AnnualSummary:
    total_income: Decimal
    total_expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses
