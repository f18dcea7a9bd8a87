# coin_trail/outputs/excel_output.py

"""Excel output module backed by XlsxWriter.

The workbook holds a ``Transactions`` worksheet listing the year's
transactions as an Excel table and a ``Cashflow`` worksheet with one row per
month (income, expenses, net), a totals row, and a grouped column chart of
income against expenses.
"""

from __future__ import annotations

import logging
import os
import xlsxwriter

from coin_trail.core.cashflow import aggregate, summarize
from coin_trail.core.categorizer import categorize, index_categories
from coin_trail.outputs.base import BaseOutput
from coin_trail.presenter import EXPENSES_COLOR, INCOME_COLOR, month_label

logger = logging.getLogger(__name__)


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook with a cashflow chart."""

    TRANSACTIONS = "Transactions"
    CASHFLOW = "Cashflow"

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("output_dir", "data")
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, year, transactions, categories):
        by_id = index_categories(categories)
        year_txs = sorted(
            (tx for tx in transactions if tx.transaction_date.year == year),
            key=lambda tx: (tx.transaction_date, tx.id),
        )
        out_path = os.path.join(self.output_dir, f"CoinTrail{year}.xlsx")

        workbook = xlsxwriter.Workbook(out_path)
        amount_fmt = workbook.add_format({"num_format": "$#,##0.00"})
        bold_amount_fmt = workbook.add_format({"num_format": "$#,##0.00", "bold": True})
        bold_fmt = workbook.add_format({"bold": True})

        tx_ws = workbook.add_worksheet(self.TRANSACTIONS)
        tx_ws.freeze_panes(1, 0)
        headers = ["date", "description", "category", "type", "amount"]
        tx_ws.write_row(0, 0, headers)
        for idx, tx in enumerate(year_txs, start=1):
            category = categorize(tx, by_id)
            tx_ws.write_row(idx, 0, [
                tx.transaction_date.isoformat(),
                tx.description,
                category.name if category else "",
                category.type.value if category else "",
            ])
            tx_ws.write_number(idx, 4, float(tx.amount), amount_fmt)
        tx_ws.set_column(4, 4, None, amount_fmt)
        tx_ws.add_table(0, 0, max(len(year_txs), 1), 4, {
            "columns": [{"header": h} for h in headers]
        })

        cf_ws = workbook.add_worksheet(self.CASHFLOW)
        cf_ws.freeze_panes(1, 0)
        cf_ws.set_column(1, 3, 14, amount_fmt)
        table = self._build_cashflow_table(year, aggregate(year_txs, by_id, year))
        for row_idx, row in enumerate(table):
            if row_idx == 0:
                cf_ws.write_row(row_idx, 0, row, bold_fmt)
                continue
            is_total = row_idx == len(table) - 1
            cf_ws.write(row_idx, 0, row[0], bold_fmt if is_total else None)
            for col_idx, value in enumerate(row[1:], start=1):
                cf_ws.write_number(row_idx, col_idx, value, bold_amount_fmt if is_total else amount_fmt)

        self._insert_chart(workbook, cf_ws, year)

        workbook.close()
        logger.info("Written Excel workbook %s", out_path)
        return out_path

    def _build_cashflow_table(self, year, buckets):
        ordered = sorted(buckets, key=lambda b: b.month)
        rows = [["Month", "Income", "Expenses", "Net"]]
        for bucket in ordered:
            rows.append([
                month_label(year, bucket.month),
                float(bucket.income),
                float(bucket.expenses),
                float(bucket.income - bucket.expenses),
            ])
        summary = summarize(ordered)
        rows.append([
            "Total",
            float(summary.total_income),
            float(summary.total_expenses),
            float(summary.balance),
        ])
        return rows

    def _insert_chart(self, workbook, cf_ws, year):
        chart = workbook.add_chart({"type": "column"})
        for col, name, color in ((1, "Income", INCOME_COLOR), (2, "Expenses", EXPENSES_COLOR)):
            chart.add_series({
                "name": name,
                "categories": [cf_ws.name, 1, 0, 12, 0],
                "values": [cf_ws.name, 1, col, 12, col],
                "fill": {"color": color},
            })
        chart.set_title({"name": f"Cashflow {year}"})
        chart.set_legend({"position": "top"})
        chart.set_y_axis({"num_format": "$#,##0"})
        cf_ws.insert_chart(0, 5, chart, {"x_offset": 0, "y_offset": 0})
