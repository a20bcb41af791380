from datetime import date

from db import get_db
from models.recurring_dto import FREQUENCIES, TRANSACTION_TYPES, RecurringRule
from repositories.accounts_repository import get_account
from repositories.recurring_repository import (
    create_recurring_rule,
    deactivate_recurring_rule,
    get_active_recurring_rules,
    get_recurring_rule,
    update_recurring_rule,
)
from utils.money import parse_positive_money


class RecordNotFound(LookupError):
    pass


def validate_rule(*, description, amount, type_, frequency, day_of_month, day_of_week):
    """Raise ValueError describing the first invalid field."""
    if not description or not description.strip():
        raise ValueError("Description is required")
    parse_positive_money(amount)
    if type_ not in TRANSACTION_TYPES:
        raise ValueError("Type must be income or expense")
    if frequency not in FREQUENCIES:
        raise ValueError("Invalid frequency")
    if frequency == "monthly" and (day_of_month is None or not 1 <= day_of_month <= 31):
        raise ValueError("Invalid day of month")
    if frequency in ("weekly", "biweekly") and (day_of_week is None or not 0 <= day_of_week <= 6):
        raise ValueError("Invalid day of week")


def list_rules(group_id):
    conn = get_db()
    try:
        return get_active_recurring_rules(conn, group_id)
    finally:
        conn.close()


def create_rule(*, group_id, description, amount, type_, frequency, start_date: date,
                account_id, day_of_month=None, day_of_week=None, category_id=None):
    validate_rule(
        description=description, amount=amount, type_=type_, frequency=frequency,
        day_of_month=day_of_month, day_of_week=day_of_week,
    )

    conn = get_db()
    try:
        if get_account(conn, account_id, group_id) is None:
            raise RecordNotFound("Account not found")

        rule = RecurringRule(
            id=None,
            description=description.strip(),
            amount=parse_positive_money(amount),
            type=type_,
            frequency=frequency,
            start_date=start_date,
            account_id=account_id,
            day_of_month=day_of_month,
            day_of_week=day_of_week,
            category_id=category_id,
            group_id=group_id,
        )
        rule_id = create_recurring_rule(conn, rule)
        return get_recurring_rule(conn, rule_id, group_id)
    finally:
        conn.close()


def update_rule(rule_id, group_id, fields: dict):
    """Partial update of description/amount/category/account/active flag.

    Only keys present in ``fields`` change; ``category_id: None`` clears the
    category.
    """
    fields = dict(fields)
    for required in ("description", "amount", "account_id", "is_active"):
        if required in fields and fields[required] is None:
            raise ValueError(f"{required} cannot be null")
    if "description" in fields:
        if not fields["description"].strip():
            raise ValueError("Description is required")
        fields["description"] = fields["description"].strip()
    if "amount" in fields:
        fields["amount"] = parse_positive_money(fields["amount"])

    conn = get_db()
    try:
        if get_recurring_rule(conn, rule_id, group_id) is None:
            raise RecordNotFound("Recurring rule not found")
        if "account_id" in fields and get_account(conn, fields["account_id"], group_id) is None:
            raise RecordNotFound("Account not found")

        update_recurring_rule(conn, rule_id, group_id, fields)
        return get_recurring_rule(conn, rule_id, group_id)
    finally:
        conn.close()


def deactivate_rule(rule_id, group_id):
    conn = get_db()
    try:
        if get_recurring_rule(conn, rule_id, group_id) is None:
            raise RecordNotFound("Recurring rule not found")
        deactivate_recurring_rule(conn, rule_id, group_id)
    finally:
        conn.close()
