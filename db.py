import duckdb
import logging

import config

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=config.LOG_FILE,
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection.
    """
    return duckdb.connect(config.DB_FILE)

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db():
    conn = get_db()
    try:
        for seq in ("accounts_id_seq", "transactions_id_seq", "recurring_id_seq"):
            conn.execute(f"CREATE SEQUENCE IF NOT EXISTS {seq} START 1")

        # Accounts table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY DEFAULT nextval('accounts_id_seq'),
            group_id INTEGER NOT NULL,
            name VARCHAR NOT NULL,
            initial_balance DECIMAL(12,2) NOT NULL DEFAULT 0,
            current_balance DECIMAL(12,2) NOT NULL DEFAULT 0,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Accounts table ensured.")

        # Recurring rules table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS recurring_transactions (
            id INTEGER PRIMARY KEY DEFAULT nextval('recurring_id_seq'),
            group_id INTEGER NOT NULL,
            description VARCHAR NOT NULL,
            amount DECIMAL(12,2) NOT NULL CHECK (amount > 0),
            type VARCHAR NOT NULL CHECK (type IN ('income','expense')),
            frequency VARCHAR NOT NULL
                CHECK (frequency IN ('daily','weekly','biweekly','monthly','yearly')),
            day_of_month INTEGER,
            day_of_week INTEGER,
            start_date DATE NOT NULL,
            last_execution_date DATE,
            account_id INTEGER NOT NULL,
            category_id INTEGER,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Recurring transactions table ensured.")

        # Transactions table
        # UNIQUE(recurring_transaction_id, date) rejects a second materialization
        # of the same rule on the same day when two sweeps race.
        conn.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id BIGINT PRIMARY KEY DEFAULT nextval('transactions_id_seq'),
            group_id INTEGER NOT NULL,
            account_id INTEGER NOT NULL,
            type VARCHAR NOT NULL CHECK (type IN ('income','expense')),
            amount DECIMAL(12,2) NOT NULL,
            date DATE NOT NULL,
            description TEXT NOT NULL,
            category_id INTEGER,
            recurring_transaction_id INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(recurring_transaction_id, date)
        );
        """)
        log_info("Transactions table ensured.")

        # Indexes
        conn.execute("CREATE INDEX IF NOT EXISTS idx_tx_account_date ON transactions(account_id, date);")
        log_info("Indexes created/ensured.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        conn.close()
        log_info("Database setup complete and connection closed.")
