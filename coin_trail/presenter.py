# coin_trail/presenter.py

"""Turn monthly cashflow buckets into what the dashboard renders.

The view is a grouped bar chart (income and expenses per month) next to a
three line summary. Month names always come from :func:`month_label` so the
axis, the tooltips, the month filter and the exports agree on the text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence

from coin_trail.core.cashflow import summarize
from coin_trail.core.models import MonthlyBucket

INCOME_COLOR = "#84cc16"
EXPENSES_COLOR = "#f97316"

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")


def month_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%b")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_currency(value) -> str:
    """Format *value* with thousands separators and up to two decimals.

    Whole amounts drop the decimals entirely: ``$1,000`` but ``$1,000.50``.
    Negative amounts put the sign before the currency symbol.
    """
    amount = _to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        text = f"{amount:,.0f}"
    else:
        text = f"{amount:,.2f}"
    return f"{sign}${text}"


def format_axis_tick(value) -> str:
    amount = _to_decimal(value).quantize(_UNITS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def _axis_ticks(maximum: Decimal, count: int = 4) -> List[int]:
    if maximum <= 0:
        return [0]
    top = int(maximum.to_integral_value(rounding=ROUND_CEILING))
    raw_step = max(1, -(-top // count))
    magnitude = 10 ** (len(str(raw_step)) - 1)
    step = magnitude
    for factor in (1, 2, 5, 10):
        step = factor * magnitude
        if step >= raw_step:
            break
    return list(range(0, top + step, step))


@dataclass
class ChartPoint:
    month: int
    label: str
    income: Decimal
    expenses: Decimal

    @property
    def income_text(self) -> str:
        return format_currency(self.income)

    @property
    def expenses_text(self) -> str:
        return format_currency(self.expenses)


@dataclass
class LegendEntry:
    key: str
    label: str
    color: str


@dataclass
class AxisTick:
    value: int
    label: str


@dataclass
class SummaryView:
    income: Decimal
    expenses: Decimal
    balance: Decimal

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0

    @property
    def income_text(self) -> str:
        return format_currency(self.income)

    @property
    def expenses_text(self) -> str:
        return format_currency(self.expenses)

    @property
    def balance_text(self) -> str:
        return format_currency(self.balance)


@dataclass
class CashflowView:
    year: int
    series: List[ChartPoint]
    summary: SummaryView
    ticks: List[AxisTick]
    legend: List[LegendEntry] = field(default_factory=list)

    @property
    def axis_max(self) -> int:
        return self.ticks[-1].value

    def bar_height(self, value) -> float:
        """Height of a bar as a percentage of the y-axis."""
        if not self.axis_max:
            return 0.0
        return round(float(_to_decimal(value) / self.axis_max * 100), 2)

    def to_dict(self) -> Dict[str, object]:
        return {
            "year": self.year,
            "series": [
                {
                    "month": point.month,
                    "label": point.label,
                    "income": float(point.income),
                    "expenses": float(point.expenses),
                }
                for point in self.series
            ],
            "legend": [entry.__dict__ for entry in self.legend],
            "ticks": [tick.__dict__ for tick in self.ticks],
            "summary": {
                "income": float(self.summary.income),
                "expenses": float(self.summary.expenses),
                "balance": float(self.summary.balance),
                "is_positive": self.summary.is_positive,
                "income_text": self.summary.income_text,
                "expenses_text": self.summary.expenses_text,
                "balance_text": self.summary.balance_text,
            },
        }


def present(buckets: Sequence[MonthlyBucket], year: int) -> CashflowView:
    """Build the chart series and year summary for *year*."""
    ordered = sorted(buckets, key=lambda bucket: bucket.month)
    series = [
        ChartPoint(
            month=bucket.month,
            label=month_label(year, bucket.month),
            income=bucket.income,
            expenses=bucket.expenses,
        )
        for bucket in ordered
    ]
    totals = summarize(ordered)
    summary = SummaryView(
        income=totals.total_income,
        expenses=totals.total_expenses,
        balance=totals.balance,
    )

    peak = max(
        [Decimal("0")] + [max(point.income, point.expenses) for point in series]
    )
    ticks = [AxisTick(value=value, label=format_axis_tick(value)) for value in _axis_ticks(peak)]
    legend = [
        LegendEntry(key="income", label="Income", color=INCOME_COLOR),
        LegendEntry(key="expenses", label="Expenses", color=EXPENSES_COLOR),
    ]
    return CashflowView(year=year, series=series, summary=summary, ticks=ticks, legend=legend)
