import calendar
import logging
import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from coin_trail.core.models import Category, CategoryType, Transaction, User

logger = logging.getLogger(__name__)

_TRANSACTION_COLUMNS = "id, user_id, amount, category_id, transaction_date, description"


def _init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
            UNIQUE(name, type)
        );
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id),
            category_id INTEGER NOT NULL REFERENCES categories(id),
            amount TEXT NOT NULL,
            transaction_date TEXT NOT NULL,
            description TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_transactions_user_date
            ON transactions (user_id, transaction_date);
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys = ON")
    _init_db(conn)
    return conn


def _row_to_transaction(row) -> Transaction:
    return Transaction(
        id=int(row[0]),
        user_id=int(row[1]),
        amount=Decimal(row[2]),
        category_id=int(row[3]),
        transaction_date=date.fromisoformat(row[4]),
        description=row[5],
    )


def _row_to_category(row) -> Category:
    return Category(id=int(row[0]), name=row[1], type=CategoryType(row[2]))


def init_db(db_path: str) -> None:
    conn = _connect(db_path)
    conn.close()


def seed_categories(db_path: str, categories: Dict[str, Iterable[str]]) -> int:
    """Insert the configured categories that are not stored yet.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    categories:
        Mapping of category type (``income`` / ``expense``) to category names.

    Returns the number of categories added.
    """
    rows = []
    for category_type, names in categories.items():
        kind = CategoryType(category_type)
        for name in names or []:
            rows.append((str(name).strip(), kind.value))

    conn = _connect(db_path)
    try:
        before = conn.total_changes
        conn.executemany(
            "INSERT OR IGNORE INTO categories (name, type) VALUES (?, ?)",
            rows,
        )
        conn.commit()
        added = conn.total_changes - before
    finally:
        conn.close()
    logger.info("Seeded %d categor%s into %s", added, "y" if added == 1 else "ies", db_path)
    return added


def create_user(db_path: str, username: str, password_hash: str) -> int:
    conn = _connect(db_path)
    try:
        cursor = conn.execute(
            "INSERT INTO users (username, password_hash) VALUES (?, ?)",
            (username, password_hash),
        )
        conn.commit()
        return int(cursor.lastrowid)
    finally:
        conn.close()


def get_user_by_username(db_path: str, username: str) -> Optional[User]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT id, username, password_hash FROM users WHERE username = ?",
            (username,),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        return None
    return User(id=int(row[0]), username=row[1], password_hash=row[2])


def list_categories(db_path: str, category_type: Optional[CategoryType] = None) -> List[Category]:
    conn = _connect(db_path)
    try:
        query = "SELECT id, name, type FROM categories"
        params: list = []
        if category_type is not None:
            query += " WHERE type = ?"
            params.append(CategoryType(category_type).value)
        query += " ORDER BY type, name"
        rows = conn.execute(query, params).fetchall()
        return [_row_to_category(r) for r in rows]
    finally:
        conn.close()


def get_category(db_path: str, category_id: int) -> Optional[Category]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT id, name, type FROM categories WHERE id = ?",
            (category_id,),
        ).fetchone()
    finally:
        conn.close()
    return _row_to_category(row) if row else None


def fetch_transactions(
    db_path: str,
    user_id: int,
    year: int,
    month: Optional[int] = None,
) -> List[Transaction]:
    """Retrieve a user's transactions for a year, or a single month of it.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    user_id:
        Owner of the transactions; rows of other users are never returned.
    year:
        Calendar year to fetch.
    month:
        Optional month (1-12) to narrow the result to.
    """
    if month is None:
        start, end = date(year, 1, 1), date(year, 12, 31)
    else:
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])

    conn = _connect(db_path)
    try:
        rows = conn.execute(
            f"""
            SELECT {_TRANSACTION_COLUMNS}
            FROM transactions
            WHERE user_id = ? AND transaction_date >= ? AND transaction_date <= ?
            ORDER BY transaction_date DESC, id DESC
            """,
            (user_id, start.isoformat(), end.isoformat()),
        ).fetchall()
        return [_row_to_transaction(r) for r in rows]
    finally:
        conn.close()


def fetch_recent_transactions(db_path: str, user_id: int, limit: int = 5) -> List[Transaction]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            f"""
            SELECT {_TRANSACTION_COLUMNS}
            FROM transactions
            WHERE user_id = ?
            ORDER BY transaction_date DESC, id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [_row_to_transaction(r) for r in rows]
    finally:
        conn.close()


def get_transaction(db_path: str, transaction_id: int, user_id: int) -> Optional[Transaction]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, user_id),
        ).fetchone()
    finally:
        conn.close()
    return _row_to_transaction(row) if row else None


def transaction_years(db_path: str, user_id: int, today: Optional[date] = None) -> List[int]:
    """Years selectable in the transaction filter, oldest first.

    The range runs from the year of the user's earliest transaction up to the
    current year.
    """
    today = today or date.today()
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT MIN(transaction_date) FROM transactions WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    finally:
        conn.close()
    first_year = date.fromisoformat(row[0]).year if row and row[0] else today.year
    return list(range(min(first_year, today.year), today.year + 1))


def insert_transaction(db_path: str, record: Dict[str, object]) -> int:
    """Persist a new transaction and return its id.

    *record* holds ``user_id``, ``amount``, ``category_id``,
    ``transaction_date`` and ``description``.
    """
    tx_date = record["transaction_date"]
    conn = _connect(db_path)
    try:
        cursor = conn.execute(
            """
            INSERT INTO transactions
            (user_id, category_id, amount, transaction_date, description)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                int(record["user_id"]),
                int(record["category_id"]),
                str(record["amount"]),
                tx_date.isoformat() if hasattr(tx_date, "isoformat") else str(tx_date),
                str(record["description"]),
            ),
        )
        conn.commit()
        return int(cursor.lastrowid)
    finally:
        conn.close()


def delete_transaction(db_path: str, transaction_id: int, user_id: int) -> bool:
    """Delete a transaction owned by *user_id*; False when nothing matched."""
    conn = _connect(db_path)
    try:
        cursor = conn.execute(
            "DELETE FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, user_id),
        )
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()
