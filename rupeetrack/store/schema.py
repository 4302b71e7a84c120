"""Database schema initialization."""

import os
import sqlite3
from pathlib import Path

from rupeetrack.errors import PersistenceError


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "rupeetrack" / "rupeetrack.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run on an existing database.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        PersistenceError: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        conn = sqlite3.connect(db_path)
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not open database {db_path}: {e}") from e

    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """
        )

        # Amounts are stored as decimal text so no precision is lost
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
                amount TEXT NOT NULL,
                category TEXT NOT NULL,
                description TEXT,
                date TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_user_date ON transactions(user_id, date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_user_type_category ON transactions(user_id, type, category)")

        conn.commit()

    except sqlite3.Error as e:
        conn.rollback()
        raise PersistenceError(f"Database initialization failed: {e}") from e
    finally:
        conn.close()
