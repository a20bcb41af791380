import logging
from datetime import date

from duckdb import IntegrityError

from db import get_db
from models.recurring_dto import RecurringRule
from repositories.accounts_repository import recompute_account_balance
from repositories.recurring_repository import get_active_recurring_rules, mark_executed
from repositories.transactions_repository import insert_transaction
from services.recurring_engine import is_due_on


def _materialize(conn, rule: RecurringRule, today: date):
    """Insert today's transaction, stamp the rule, recompute the account.

    All three writes share one DuckDB transaction.
    """
    conn.begin()
    try:
        insert_transaction(
            conn,
            group_id=rule.group_id,
            account_id=rule.account_id,
            type_=rule.type,
            amount=rule.amount,
            date=today,
            description=rule.description,
            category_id=rule.category_id,
            recurring_transaction_id=rule.id,
        )
        mark_executed(conn, rule.id, today)
        recompute_account_balance(conn, rule.account_id)
    except Exception:
        conn.rollback()
        raise
    # a failed commit is rolled back by DuckDB itself
    conn.commit()


def process_due_recurring(group_id: int, today: date):
    """Materialize every active rule of ``group_id`` that is due on ``today``.

    Meant to run once per app-open. Each rule is handled on its own: a failure
    is rolled back and logged, and the remaining rules still run. A rule that
    already produced today's row (a concurrent sweep won the race) is skipped.
    """
    conn = get_db()
    try:
        rules = get_active_recurring_rules(conn, group_id)
        if not rules:
            return {
                "success": True,
                "message": "No active recurring rules",
                "processed": 0,
                "skipped": 0,
                "failed": [],
                "date": today.isoformat(),
            }

        processed = 0
        skipped = 0
        failed = []

        for rule in rules:
            if not is_due_on(rule, today):
                continue

            try:
                _materialize(conn, rule, today)
            except IntegrityError:
                skipped += 1
                logging.warning(
                    f"Recurring rule {rule.id} already materialized for {today.isoformat()}"
                )
                continue
            except Exception as e:
                failed.append({"rule_id": rule.id, "error": str(e)})
                logging.exception(f"Recurring rule {rule.id} failed to materialize")
                continue

            processed += 1
            logging.info(
                f"Recurring rule {rule.id} materialized on {today.isoformat()} "
                f"(account={rule.account_id}, amount={rule.amount})"
            )
    finally:
        conn.close()

    return {
        "success": not failed,
        "processed": processed,
        "skipped": skipped,
        "failed": failed,
        "date": today.isoformat(),
    }
