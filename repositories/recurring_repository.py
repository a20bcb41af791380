from models.recurring_dto import RecurringRule

# -----------------------------
# Recurring Rules Repository
# -----------------------------

RULE_COLUMNS = (
    "id", "group_id", "description", "amount", "type", "frequency",
    "day_of_month", "day_of_week", "start_date", "last_execution_date",
    "account_id", "category_id", "is_active",
)
_SELECT = f"SELECT {', '.join(RULE_COLUMNS)} FROM recurring_transactions"


def _to_rule(row):
    return RecurringRule.from_row(dict(zip(RULE_COLUMNS, row)))


def get_active_recurring_rules(conn, group_id):
    """Return the group's active rules, oldest first.

    The order is the order the projector applies same-day rules in.
    """
    rows = conn.execute(
        _SELECT + " WHERE group_id = ? AND is_active = TRUE ORDER BY id",
        (group_id,)
    ).fetchall()
    return [_to_rule(r) for r in rows]


def get_recurring_rule(conn, rule_id, group_id):
    row = conn.execute(
        _SELECT + " WHERE id = ? AND group_id = ?",
        (rule_id, group_id)
    ).fetchone()
    return _to_rule(row) if row else None


def create_recurring_rule(conn, rule: RecurringRule):
    """Insert a rule and return its new id.

    Only the anchor matching the frequency is stored.
    """
    day_of_month = rule.day_of_month if rule.frequency == "monthly" else None
    day_of_week = rule.day_of_week if rule.frequency in ("weekly", "biweekly") else None

    row = conn.execute(
        """
        INSERT INTO recurring_transactions
        (group_id, description, amount, type, frequency, day_of_month, day_of_week,
         start_date, last_execution_date, account_id, category_id, is_active)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, TRUE)
        RETURNING id
        """,
        (rule.group_id, rule.description, rule.amount, rule.type, rule.frequency,
         day_of_month, day_of_week, rule.start_date, rule.last_execution_date,
         rule.account_id, rule.category_id)
    ).fetchone()
    return row[0]


def update_recurring_rule(conn, rule_id, group_id, fields: dict):
    """Update the whitelisted editable fields of a rule."""
    editable = ("description", "amount", "category_id", "account_id", "is_active")
    changes = {k: v for k, v in fields.items() if k in editable}
    if not changes:
        return

    assignments = ", ".join(f"{k} = ?" for k in changes)
    conn.execute(
        f"UPDATE recurring_transactions SET {assignments} WHERE id = ? AND group_id = ?",
        [*changes.values(), rule_id, group_id]
    )


def deactivate_recurring_rule(conn, rule_id, group_id):
    """Soft delete: rules are never removed, only switched off."""
    conn.execute(
        "UPDATE recurring_transactions SET is_active = FALSE WHERE id = ? AND group_id = ?",
        (rule_id, group_id)
    )


def mark_executed(conn, rule_id, execution_date):
    conn.execute(
        "UPDATE recurring_transactions SET last_execution_date = ? WHERE id = ?",
        (execution_date, rule_id)
    )
