import logging
import os
import sqlite3

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Default path if env var not set
DB_PATH = os.getenv("DATABASE_PATH", "data/habits.db")


def get_db_connection():
    """Create a database connection to the SQLite database."""
    # Ensure data directory exists
    directory = os.path.dirname(DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row  # Return rows as dictionaries
    return conn


def init_db():
    """Initialize the key-value table. One JSON document per key."""
    run_query('''
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')
    return True


def run_query(query, params=()):
    """Execute a query and return results."""
    conn = get_db_connection()
    try:
        c = conn.cursor()
        c.execute(query, params)
        if query.strip().upper().startswith(("INSERT", "UPDATE", "DELETE", "CREATE")):
            conn.commit()
            return c.lastrowid
        return c.fetchall()
    except sqlite3.Error:
        logger.exception("Database error running %s", query.split()[0])
        raise
    finally:
        conn.close()


def get_value(key):
    """Raw stored text for `key`, or None."""
    init_db()
    rows = run_query("SELECT value FROM kv_store WHERE key = ?", (key,))
    return rows[0]["value"] if rows else None


def set_value(key, value):
    init_db()
    run_query(
        """
        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
        """,
        (key, value),
    )


def delete_value(key):
    init_db()
    run_query("DELETE FROM kv_store WHERE key = ?", (key,))
