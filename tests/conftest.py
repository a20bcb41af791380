import os

os.environ.setdefault("LOG_FILE", os.devnull)

from datetime import date
from decimal import Decimal

import pytest

import config
from db import get_db, init_db
from models.recurring_dto import RecurringRule
from repositories.accounts_repository import create_account
from repositories.recurring_repository import create_recurring_rule


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Fresh DuckDB file per test, schema ensured."""
    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "test.duckdb"))
    init_db()
    return config.DB_FILE


@pytest.fixture
def conn(database):
    conn = get_db()
    yield conn
    conn.close()


@pytest.fixture
def make_rule():
    def _make(**overrides):
        fields = dict(
            id=1,
            description="Rent",
            amount=Decimal("100.00"),
            type="expense",
            frequency="daily",
            start_date=date(2025, 1, 1),
            account_id=1,
        )
        fields.update(overrides)
        return RecurringRule(**fields)
    return _make


@pytest.fixture
def seed(conn):
    """Insert an account and rules for group 1; returns the account id."""
    def _seed(initial_balance="1000.00", rules=(), group_id=1):
        account_id = create_account(conn, group_id, "Checking", Decimal(initial_balance))
        for rule in rules:
            rule.account_id = account_id
            rule.group_id = group_id
            create_recurring_rule(conn, rule)
        return account_id
    return _seed
