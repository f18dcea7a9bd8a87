# coin_trail/outputs/csv_output.py

import os
import csv
import logging
from decimal import Decimal
from coin_trail.outputs.base import BaseOutput
from coin_trail.core.categorizer import categorize, index_categories

logger = logging.getLogger(__name__)


class CSVOutput(BaseOutput):
    """
    Writes a year's transactions to a single CSV file named CoinTrail<Year>.csv,
    sorted by date (oldest to latest).
    """
    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, year, transactions, categories):
        by_id = index_categories(categories)
        rows = []
        for tx in sorted(transactions, key=lambda t: (t.transaction_date, t.id)):
            if tx.transaction_date.year != year:
                continue
            category = categorize(tx, by_id)
            rows.append([
                tx.transaction_date.isoformat(),
                tx.description,
                category.name if category else '',
                category.type.value if category else '',
                f"{Decimal(tx.amount):.2f}",
            ])

        out_path = os.path.join(self.output_dir, f"CoinTrail{year}.csv")
        with open(out_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['date', 'description', 'category', 'type', 'amount'])
            writer.writerows(rows)

        logger.info("Written %d transactions to %s", len(rows), out_path)
        return out_path
