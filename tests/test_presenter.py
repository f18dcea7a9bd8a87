import random
from datetime import date
from decimal import Decimal

from coin_trail.core.models import MonthlyBucket
from coin_trail.presenter import (
    EXPENSES_COLOR,
    INCOME_COLOR,
    format_axis_tick,
    format_currency,
    month_label,
    present,
)


def _buckets(values=None):
    values = values or {}
    return [
        MonthlyBucket(
            month=m,
            income=Decimal(str(values.get(m, (0, 0))[0])),
            expenses=Decimal(str(values.get(m, (0, 0))[1])),
        )
        for m in range(1, 13)
    ]


def test_month_label_uses_given_year():
    assert month_label(2024, 1) == "Jan"
    assert month_label(2019, 12) == "Dec"
    assert month_label(2024, 2) == date(2024, 2, 1).strftime("%b")


def test_format_currency():
    assert format_currency(Decimal("1000")) == "$1,000"
    assert format_currency(Decimal("1000.5")) == "$1,000.50"
    assert format_currency(Decimal("1234567.891")) == "$1,234,567.89"
    assert format_currency(Decimal("-40")) == "-$40"
    assert format_currency(0) == "$0"
    assert format_currency(12.25) == "$12.25"


def test_format_axis_tick_rounds_to_whole_units():
    assert format_axis_tick(Decimal("1234.5")) == "$1,235"
    assert format_axis_tick(0) == "$0"
    assert format_axis_tick(250) == "$250"


def test_present_example():
    view = present(_buckets({1: (100, 40), 3: (200, 0)}), 2024)

    assert view.year == 2024
    assert [p.month for p in view.series] == list(range(1, 13))
    assert [p.label for p in view.series] == [month_label(2024, m) for m in range(1, 13)]
    assert view.series[0].income == Decimal("100")
    assert view.series[0].expenses == Decimal("40")
    assert view.summary.income_text == "$300"
    assert view.summary.expenses_text == "$40"
    assert view.summary.balance_text == "$260"
    assert view.summary.is_positive is True
    assert [t.value for t in view.ticks] == [0, 50, 100, 150, 200]
    assert view.ticks[-1].label == "$200"
    assert view.bar_height(Decimal("100")) == 50.0
    assert [(e.key, e.color) for e in view.legend] == [
        ("income", INCOME_COLOR),
        ("expenses", EXPENSES_COLOR),
    ]


def test_present_orders_series_by_month():
    buckets = _buckets({4: (10, 5)})
    random.Random(3).shuffle(buckets)

    view = present(buckets, 2022)

    assert [p.month for p in view.series] == list(range(1, 13))
    assert view.series[3].income == Decimal("10")


def test_summary_styling_has_two_states():
    zero = present(_buckets(), 2024)
    assert zero.summary.balance == 0
    assert zero.summary.is_positive is True
    assert [t.value for t in zero.ticks] == [0]
    assert zero.bar_height(Decimal("0")) == 0.0

    negative = present(_buckets({2: (10, 50)}), 2024)
    assert negative.summary.is_positive is False
    assert negative.summary.balance_text == "-$40"


def test_to_dict_is_json_ready():
    payload = present(_buckets({1: (100, 40), 3: (200, 0)}), 2024).to_dict()

    assert payload["year"] == 2024
    assert len(payload["series"]) == 12
    assert payload["series"][0] == {"month": 1, "label": "Jan", "income": 100.0, "expenses": 40.0}
    assert payload["summary"]["balance"] == 260.0
    assert payload["summary"]["is_positive"] is True
    assert payload["legend"][0]["label"] == "Income"
