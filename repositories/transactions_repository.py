# -----------------------------
# Transactions Repository
# -----------------------------

def insert_transaction(conn, group_id, account_id, type_, amount, date, description,
                       category_id=None, recurring_transaction_id=None):
    """
    Inserts a transaction and returns its id.
    - conn: DuckDB connection (from get_db() or passed in)
    - recurring_transaction_id: set when the row was materialized from a rule

    A second row for the same (recurring_transaction_id, date) raises
    duckdb.IntegrityError (DuckDB reports it as ConstraintException, a subclass).
    """
    row = conn.execute(
        """
        INSERT INTO transactions
        (group_id, account_id, type, amount, date, description, category_id,
         recurring_transaction_id)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        RETURNING id
        """,
        (group_id, account_id, type_, amount, date, description, category_id,
         recurring_transaction_id)
    ).fetchone()
    return row[0]


def get_transactions_for_account(conn, account_id, limit=None):
    """
    Returns transactions for an account, newest first, as dicts.
    - limit: optional, max number of rows
    """
    query = """
    SELECT id, date, type, amount, description, category_id, recurring_transaction_id
    FROM transactions
    WHERE account_id = ?
    ORDER BY date DESC, id DESC
    """
    params = [account_id]

    if limit:
        query += " LIMIT ?"
        params.append(limit)

    rows = conn.execute(query, params).fetchall()
    return [
        {
            "id": r[0],
            "date": r[1],
            "type": r[2],
            "amount": r[3],
            "description": r[4],
            "category_id": r[5],
            "recurring_transaction_id": r[6],
        }
        for r in rows
    ]
