import sqlite3
from datetime import date
from decimal import Decimal

from coin_trail import actions, database
from coin_trail.database import (
    create_user,
    fetch_transactions,
    get_transaction,
    list_categories,
    seed_categories,
)
from coin_trail.errors import ErrorKind

TODAY = date(2024, 6, 1)


def _setup(tmp_path):
    db_path = str(tmp_path / "actions.db")
    seed_categories(db_path, {"income": ["Salary"], "expense": ["Food"]})
    alice = create_user(db_path, "alice", "x")
    bob = create_user(db_path, "bob", "y")
    categories = {c.name: c.id for c in list_categories(db_path)}
    return db_path, alice, bob, categories


def _form(categories, **overrides):
    data = {
        "amount": "12.50",
        "transaction_date": "2024-05-20",
        "description": "Lunch with team",
        "category_id": categories["Food"],
    }
    data.update(overrides)
    return data


def test_create_transaction_inserts(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    result = actions.create_transaction(db_path, alice, _form(categories), today=TODAY)

    assert not result.error
    stored = get_transaction(db_path, result.id, alice)
    assert stored.amount == Decimal("12.50")
    assert stored.transaction_date == date(2024, 5, 20)
    assert stored.category_id == categories["Food"]
    assert stored.description == "Lunch with team"


def test_create_requires_identity(tmp_path):
    db_path, _, _, categories = _setup(tmp_path)

    result = actions.create_transaction(db_path, None, _form(categories), today=TODAY)

    assert result.error
    assert result.kind == ErrorKind.UNAUTHORIZED
    assert result.message == "Unauthorized"


def test_negative_amount_is_rejected_without_insert(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    result = actions.create_transaction(db_path, alice, _form(categories, amount=-5), today=TODAY)

    assert result.error
    assert result.kind == ErrorKind.VALIDATION
    assert result.message == "Amount must be greater than zero"
    assert fetch_transactions(db_path, alice, 2024) == []


def test_first_failing_message_is_returned(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    result = actions.create_transaction(
        db_path, alice, _form(categories, amount=0, description="x"), today=TODAY
    )

    assert result.message == "Amount must be greater than zero"


def test_transaction_date_allows_one_day_ahead(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    tomorrow = actions.create_transaction(
        db_path, alice, _form(categories, transaction_date="2024-06-02"), today=TODAY
    )
    assert not tomorrow.error

    later = actions.create_transaction(
        db_path, alice, _form(categories, transaction_date="2024-06-03"), today=TODAY
    )
    assert later.kind == ErrorKind.VALIDATION
    assert later.message == "Transaction date cannot be in the future"


def test_description_length_bounds(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    short = actions.create_transaction(db_path, alice, _form(categories, description="ab"), today=TODAY)
    assert short.message == "Description must contain at least 3 characters"

    long = actions.create_transaction(db_path, alice, _form(categories, description="a" * 301), today=TODAY)
    assert long.message == "Description must contain at most 300 characters"

    edge = actions.create_transaction(db_path, alice, _form(categories, description="a" * 300), today=TODAY)
    assert not edge.error


def test_category_must_be_selected_and_known(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    missing = actions.create_transaction(db_path, alice, _form(categories, category_id=None), today=TODAY)
    assert missing.kind == ErrorKind.VALIDATION
    assert missing.message == "Please select a category"

    unknown = actions.create_transaction(db_path, alice, _form(categories, category_id=999), today=TODAY)
    assert unknown.message == "Please select a category"
    assert fetch_transactions(db_path, alice, 2024) == []


def test_category_type_must_match_transaction_type(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    result = actions.create_transaction(
        db_path, alice, _form(categories, transaction_type="income"), today=TODAY
    )

    assert result.kind == ErrorKind.VALIDATION
    assert result.message == "Category does not match the transaction type"


def test_storage_errors_are_reported(tmp_path, monkeypatch):
    db_path, alice, _, categories = _setup(tmp_path)

    def broken_insert(*_args, **_kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(database, "insert_transaction", broken_insert)
    result = actions.create_transaction(db_path, alice, _form(categories), today=TODAY)

    assert result.kind == ErrorKind.STORAGE
    assert result.message == "Failed to create transaction"


def test_delete_transaction_checks_ownership(tmp_path):
    db_path, alice, bob, categories = _setup(tmp_path)
    created = actions.create_transaction(db_path, alice, _form(categories), today=TODAY)

    foreign = actions.delete_transaction(db_path, bob, created.id)
    assert foreign.kind == ErrorKind.NOT_FOUND
    assert get_transaction(db_path, created.id, alice) is not None

    anonymous = actions.delete_transaction(db_path, None, created.id)
    assert anonymous.kind == ErrorKind.UNAUTHORIZED

    own = actions.delete_transaction(db_path, alice, created.id)
    assert not own.error
    assert get_transaction(db_path, created.id, alice) is None

    again = actions.delete_transaction(db_path, alice, created.id)
    assert again.kind == ErrorKind.NOT_FOUND
    assert again.message == "Transaction not found"


def test_amount_beyond_storable_range_is_rejected(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    huge = actions.create_transaction(db_path, alice, _form(categories, amount="1e30"), today=TODAY)
    fractional = actions.create_transaction(
        db_path, alice, _form(categories, amount="1.005"), today=TODAY
    )

    assert huge.kind == ErrorKind.VALIDATION
    assert huge.message == "Amount must be at most 9,999,999,999.99"
    assert fractional.kind == ErrorKind.VALIDATION
    assert fractional.message == "Amount can have at most 2 decimal places"
    assert fetch_transactions(db_path, alice, 2024) == []


def test_largest_amount_is_accepted(tmp_path):
    db_path, alice, _, categories = _setup(tmp_path)

    result = actions.create_transaction(
        db_path, alice, _form(categories, amount="9999999999.99"), today=TODAY
    )

    assert not result.error
    assert get_transaction(db_path, result.id, alice).amount == Decimal("9999999999.99")
