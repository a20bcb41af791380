from decimal import Decimal

from models.recurring_dto import Account

# -----------------------------
# Accounts Repository
# -----------------------------

def create_account(conn, group_id, name, initial_balance=Decimal("0")):
    """Insert an account whose current balance starts at its initial balance."""
    row = conn.execute(
        """
        INSERT INTO accounts (group_id, name, initial_balance, current_balance)
        VALUES (?, ?, ?, ?)
        RETURNING id
        """,
        (group_id, name, initial_balance, initial_balance)
    ).fetchone()
    return row[0]


def list_active_accounts(conn, group_id):
    """Return the group's active accounts with their stored balances."""
    rows = conn.execute(
        """
        SELECT id, name, current_balance, is_active
        FROM accounts
        WHERE group_id = ? AND is_active = TRUE
        ORDER BY id
        """,
        (group_id,)
    ).fetchall()
    return [
        Account(id=r[0], name=r[1], current_balance=r[2], is_active=r[3])
        for r in rows
    ]


def get_account(conn, account_id, group_id=None):
    """Return a single account as a dict, or None if missing.

    When ``group_id`` is given the account must also belong to that group.
    """
    query = """
        SELECT id, group_id, name, initial_balance, current_balance, is_active
        FROM accounts
        WHERE id = ?
    """
    params = [account_id]
    if group_id is not None:
        query += " AND group_id = ?"
        params.append(group_id)

    row = conn.execute(query, params).fetchone()
    if not row:
        return None
    return {
        "id": row[0],
        "group_id": row[1],
        "name": row[2],
        "initial_balance": row[3],
        "current_balance": row[4],
        "is_active": row[5],
    }


def recompute_account_balance(conn, account_id):
    """Set current_balance = initial_balance + income - expense over all of the
    account's transactions. Full recompute, never an incremental delta.

    Returns the new balance, or None if the account does not exist.
    """
    row = conn.execute(
        """
        SELECT a.initial_balance
             + COALESCE(SUM(CASE WHEN t.type = 'income' THEN t.amount ELSE 0 END), 0)
             - COALESCE(SUM(CASE WHEN t.type = 'expense' THEN t.amount ELSE 0 END), 0)
        FROM accounts a
        LEFT JOIN transactions t ON t.account_id = a.id
        WHERE a.id = ?
        GROUP BY a.initial_balance
        """,
        (account_id,)
    ).fetchone()
    if not row:
        return None

    balance = row[0]
    conn.execute(
        "UPDATE accounts SET current_balance = ? WHERE id = ?",
        (balance, account_id)
    )
    return balance
