from datetime import date
from decimal import Decimal

from coin_trail.core.models import Category, CategoryType, MonthlyBucket, Transaction
from coin_trail.outputs import get_output
from coin_trail.outputs.csv_output import CSVOutput
from coin_trail.outputs.excel_output import ExcelOutput

SALARY = Category(id=1, name="Salary", type=CategoryType.INCOME)
RENT = Category(id=2, name="Rent", type=CategoryType.EXPENSE)


def _tx(tx_id, amount, category_id, tx_date, description="entry"):
    return Transaction(
        id=tx_id,
        user_id=1,
        amount=Decimal(amount),
        category_id=category_id,
        transaction_date=tx_date,
        description=description,
    )


def test_build_cashflow_table_orders_months_and_totals():
    out = object.__new__(ExcelOutput)
    buckets = [MonthlyBucket(month=m) for m in range(12, 0, -1)]
    buckets[-1].income = Decimal("1500")
    buckets[0].expenses = Decimal("250.25")

    table = out._build_cashflow_table(2024, buckets)

    assert table[0] == ["Month", "Income", "Expenses", "Net"]
    assert [row[0] for row in table[1:13]] == [
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ]
    assert table[1] == ["Jan", 1500.0, 0.0, 1500.0]
    assert table[12] == ["Dec", 0.0, 250.25, -250.25]
    assert table[13] == ["Total", 1500.0, 250.25, 1249.75]


def test_csv_output_sorts_and_keeps_only_the_year(tmp_path):
    out = CSVOutput({"output_dir": str(tmp_path)})
    txs = [
        _tx(3, "900", RENT.id, date(2024, 2, 1), "Rent"),
        _tx(1, "3000", SALARY.id, date(2024, 1, 31), "Pay"),
        _tx(2, "10", 42, date(2024, 1, 31), "Orphan"),
        _tx(4, "5", RENT.id, date(2023, 12, 31), "Last year"),
    ]

    path = out.write(2024, txs, [SALARY, RENT])

    lines = (tmp_path / "CoinTrail2024.csv").read_text().splitlines()
    assert path.endswith("CoinTrail2024.csv")
    assert lines == [
        "date,description,category,type,amount",
        "2024-01-31,Pay,Salary,income,3000.00",
        "2024-01-31,Orphan,,,10.00",
        "2024-02-01,Rent,Rent,expense,900.00",
    ]


def test_get_output_resolves_configured_class(tmp_path):
    config = {
        "output_dir": str(tmp_path),
        "output_modules": {"csv": "coin_trail.outputs.csv_output.CSVOutput"},
    }
    assert isinstance(get_output("csv", config), CSVOutput)
