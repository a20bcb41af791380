from datetime import date
from decimal import Decimal

import pytest
from duckdb import IntegrityError

import services.recurring_service as recurring_service
from repositories.accounts_repository import get_account
from repositories.recurring_repository import get_active_recurring_rules
from repositories.transactions_repository import get_transactions_for_account, insert_transaction
from services.recurring_service import process_due_recurring

TODAY = date(2025, 2, 5)  # Wednesday


def test_due_rule_materializes_transaction_and_updates_state(conn, seed, make_rule):
    account_id = seed("1000.00", [make_rule(frequency="daily", amount=Decimal("50"))])

    result = process_due_recurring(1, TODAY)

    assert result["processed"] == 1
    assert result["success"] is True
    assert result["date"] == "2025-02-05"

    txs = get_transactions_for_account(conn, account_id)
    assert len(txs) == 1
    assert txs[0]["date"] == TODAY
    assert txs[0]["type"] == "expense"
    assert txs[0]["amount"] == Decimal("50.00")
    assert txs[0]["recurring_transaction_id"] is not None

    assert get_account(conn, account_id)["current_balance"] == Decimal("950.00")
    assert get_active_recurring_rules(conn, 1)[0].last_execution_date == TODAY


def test_second_sweep_same_day_processes_nothing(conn, seed, make_rule):
    account_id = seed("1000.00", [
        make_rule(frequency="daily", amount=Decimal("50")),
        make_rule(frequency="weekly", day_of_week=3, amount=Decimal("200"), type="income"),
    ])

    first = process_due_recurring(1, TODAY)
    second = process_due_recurring(1, TODAY)

    assert first["processed"] == 2
    assert second["processed"] == 0
    assert len(get_transactions_for_account(conn, account_id)) == 2
    assert get_account(conn, account_id)["current_balance"] == Decimal("1150.00")


def test_rules_not_due_are_left_alone(conn, seed, make_rule):
    account_id = seed("1000.00", [
        make_rule(frequency="monthly", day_of_month=20),
        make_rule(frequency="daily", start_date=date(2025, 3, 1)),
    ])

    result = process_due_recurring(1, TODAY)

    assert result["processed"] == 0
    assert get_transactions_for_account(conn, account_id) == []
    assert all(r.last_execution_date is None for r in get_active_recurring_rules(conn, 1))


def test_balance_is_fully_recomputed_from_history(conn, seed, make_rule):
    account_id = seed("1000.00", [make_rule(frequency="daily", amount=Decimal("50"))])
    insert_transaction(conn, 1, account_id, "income", Decimal("300"), date(2025, 2, 1), "Bonus")

    process_due_recurring(1, TODAY)

    # stored balance never saw the bonus; recompute picks it up
    assert get_account(conn, account_id)["current_balance"] == Decimal("1250.00")


def test_no_rules_reports_nothing_processed(database):
    result = process_due_recurring(1, TODAY)
    assert result["processed"] == 0
    assert result["success"] is True


def test_failed_rule_is_rolled_back_and_does_not_stop_others(conn, seed, make_rule, monkeypatch):
    seed("1000.00", [make_rule(description="Broken", frequency="daily")])
    healthy_account = seed("500.00", [make_rule(description="Fine", frequency="daily")])

    real_recompute = recurring_service.recompute_account_balance

    def flaky_recompute(c, account_id):
        if account_id != healthy_account:
            raise RuntimeError("disk full")
        return real_recompute(c, account_id)

    monkeypatch.setattr(recurring_service, "recompute_account_balance", flaky_recompute)

    result = process_due_recurring(1, TODAY)

    assert result["processed"] == 1
    assert result["success"] is False
    assert len(result["failed"]) == 1
    assert result["failed"][0]["error"] == "disk full"

    rules = {r.description: r for r in get_active_recurring_rules(conn, 1)}
    assert rules["Broken"].last_execution_date is None
    assert get_transactions_for_account(conn, rules["Broken"].account_id) == []
    assert rules["Fine"].last_execution_date == TODAY

    # retried on the next sweep
    monkeypatch.setattr(recurring_service, "recompute_account_balance", real_recompute)
    retry = process_due_recurring(1, TODAY)
    assert retry["processed"] == 1
    assert len(get_transactions_for_account(conn, rules["Broken"].account_id)) == 1


def test_concurrent_duplicate_is_skipped(conn, seed, make_rule):
    account_id = seed("1000.00", [make_rule(frequency="daily", amount=Decimal("50"))])
    rule = get_active_recurring_rules(conn, 1)[0]
    # another sweep already wrote today's row but has not stamped the rule yet
    insert_transaction(conn, 1, account_id, "expense", Decimal("50"), TODAY, "Rent",
                       recurring_transaction_id=rule.id)

    result = process_due_recurring(1, TODAY)

    assert result["processed"] == 0
    assert result["skipped"] == 1
    assert len(get_transactions_for_account(conn, account_id)) == 1


def test_other_groups_are_not_processed(conn, seed, make_rule):
    other = seed("100.00", [make_rule(frequency="daily")], group_id=2)

    result = process_due_recurring(1, TODAY)

    assert result["processed"] == 0
    assert get_transactions_for_account(conn, other) == []


def test_duplicate_materialized_row_raises_integrity_error(conn, seed, make_rule):
    account_id = seed("1000.00", [make_rule(frequency="daily")])
    rule_id = get_active_recurring_rules(conn, 1)[0].id
    insert_transaction(conn, 1, account_id, "expense", Decimal("100"), TODAY, "Rent",
                       recurring_transaction_id=rule_id)

    with pytest.raises(IntegrityError):
        insert_transaction(conn, 1, account_id, "expense", Decimal("100"), TODAY, "Rent",
                           recurring_transaction_id=rule_id)

    # rows without a rule are not constrained
    insert_transaction(conn, 1, account_id, "expense", Decimal("5"), TODAY, "Coffee")
    insert_transaction(conn, 1, account_id, "expense", Decimal("5"), TODAY, "Coffee")
    assert len(get_transactions_for_account(conn, account_id)) == 3
