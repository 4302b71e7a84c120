"""Database query functions.

Every transaction query is scoped to a user id: rows of other users are
never returned, updated or deleted.
"""

import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from rupeetrack.domain.models import CategoryName, Transaction, TransactionFilters, User
from rupeetrack.domain.transactions import TransactionFields, matches_filters
from rupeetrack.errors import PersistenceError
from rupeetrack.logging_setup import get_logger
from rupeetrack.store.schema import get_db_path

logger = get_logger(__name__)

TRANSACTION_COLUMNS = "id, user_id, type, amount, category, description, date, created_at"
UPDATABLE_COLUMNS = ("type", "amount", "category", "description", "date")


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory and foreign keys configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def _transaction(db_path: Path | None = None) -> Iterator[sqlite3.Cursor]:
    """Open a connection, commit on success, roll back and wrap errors on failure.

    Raises:
        PersistenceError: If any database operation fails.
    """
    try:
        conn = _connect(db_path)
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not open database: {e}") from e

    try:
        yield conn.cursor()
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.warning("Database operation failed: %s", e)
        raise PersistenceError(str(e)) from e
    finally:
        conn.close()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _serialize(column: str, value: Any) -> Any:
    if value is None:
        return None
    if column == "amount":
        return str(value)
    if column == "date":
        return value.isoformat()
    return value


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row["id"],
        user_id=row["user_id"],
        type=row["type"],
        amount=Decimal(row["amount"]),
        category=CategoryName(row["category"]),
        description=row["description"],
        date=date.fromisoformat(row["date"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def list_transactions(
    user_id: str,
    filters: TransactionFilters | None = None,
    ascending: bool = False,
    limit: int | None = None,
    db_path: Path | None = None,
) -> list[Transaction]:
    """List a user's transactions.

    Type and category filters run in SQL. SQLite's LIKE only folds ASCII
    case, so a description search is applied to the fetched rows with
    matches_filters instead, and the limit is taken after it.

    Args:
        user_id: Owner of the transactions.
        filters: Optional type, category and description search filters.
            The search is a case-insensitive substring match.
        ascending: If True, oldest first. If False (default), newest first.
        limit: Maximum number of transactions to return. If None, returns all.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Transactions ordered by date (ties by creation time) in the requested direction.

    Raises:
        PersistenceError: If database operation fails.
    """
    query = f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE user_id = ?"
    params: list[Any] = [user_id]

    searching = filters is not None and bool(filters.search)
    if filters is not None:
        if filters.type is not None:
            query += " AND type = ?"
            params.append(filters.type)
        if filters.category is not None:
            query += " AND category = ?"
            params.append(filters.category)
        if searching:
            query += " AND description IS NOT NULL"

    order = "ASC" if ascending else "DESC"
    query += f" ORDER BY date {order}, created_at {order}"

    if limit is not None and not searching:
        query += " LIMIT ?"
        params.append(limit)

    with _transaction(db_path) as cursor:
        cursor.execute(query, params)
        transactions = [_row_to_transaction(row) for row in cursor.fetchall()]

    if searching:
        transactions = [txn for txn in transactions if matches_filters(txn, filters)]
        if limit is not None:
            transactions = transactions[:limit]
    return transactions


def get_transaction(user_id: str, txn_id: str, db_path: Path | None = None) -> Transaction | None:
    """Get one of a user's transactions by id.

    Returns:
        The transaction, or None if it does not exist or belongs to another user.

    Raises:
        PersistenceError: If database operation fails.
    """
    with _transaction(db_path) as cursor:
        cursor.execute(
            f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ? AND user_id = ?",
            (txn_id, user_id),
        )
        row = cursor.fetchone()
        return _row_to_transaction(row) if row else None


def create_transaction(user_id: str, fields: TransactionFields, db_path: Path | None = None) -> Transaction:
    """Insert a new transaction for a user.

    Args:
        user_id: Owner of the transaction.
        fields: Validated type, amount, category, description and date.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored transaction, with its generated id and creation time.

    Raises:
        PersistenceError: If a field is missing or the store rejects the insert.
    """
    missing = [column for column in ("type", "amount", "category", "date") if column not in fields]
    if missing:
        raise PersistenceError(f"Missing transaction fields: {', '.join(missing)}")

    txn = Transaction(
        id=uuid.uuid4().hex,
        user_id=user_id,
        type=fields["type"],
        amount=fields["amount"],
        category=fields["category"],
        description=fields.get("description"),
        date=fields["date"],
        created_at=_now(),
    )

    with _transaction(db_path) as cursor:
        cursor.execute(
            f"INSERT INTO transactions ({TRANSACTION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                txn.id,
                txn.user_id,
                txn.type,
                str(txn.amount),
                txn.category,
                txn.description,
                txn.date.isoformat(),
                txn.created_at.isoformat(),
            ),
        )

    logger.debug("Created transaction %s for user %s", txn.id, user_id)
    return txn


def update_transaction(
    user_id: str, txn_id: str, fields: TransactionFields, db_path: Path | None = None
) -> Transaction:
    """Update some fields of a user's transaction.

    Args:
        user_id: Owner of the transaction.
        txn_id: Transaction id.
        fields: Validated fields to change. Fields not present are kept.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The transaction after the update.

    Raises:
        PersistenceError: If the transaction does not exist for this user or the update fails.
    """
    assignments = [(column, _serialize(column, fields[column])) for column in UPDATABLE_COLUMNS if column in fields]

    with _transaction(db_path) as cursor:
        if assignments:
            set_clause = ", ".join(f"{column} = ?" for column, _ in assignments)
            params = [value for _, value in assignments] + [txn_id, user_id]
            cursor.execute(f"UPDATE transactions SET {set_clause} WHERE id = ? AND user_id = ?", params)

        cursor.execute(
            f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ? AND user_id = ?",
            (txn_id, user_id),
        )
        row = cursor.fetchone()

    if row is None:
        raise PersistenceError(f"Transaction {txn_id} not found")

    logger.debug("Updated transaction %s (%s)", txn_id, ", ".join(column for column, _ in assignments))
    return _row_to_transaction(row)


def delete_transaction(user_id: str, txn_id: str, db_path: Path | None = None) -> None:
    """Delete a user's transaction.

    Raises:
        PersistenceError: If the transaction does not exist for this user or the delete fails.
    """
    with _transaction(db_path) as cursor:
        cursor.execute("DELETE FROM transactions WHERE id = ? AND user_id = ?", (txn_id, user_id))
        deleted = cursor.rowcount

    if deleted == 0:
        raise PersistenceError(f"Transaction {txn_id} not found")

    logger.debug("Deleted transaction %s", txn_id)


def create_user(email: str, password_hash: str, db_path: Path | None = None) -> User:
    """Insert a new user.

    Raises:
        PersistenceError: If the email is already registered or the insert fails.
    """
    user = User(id=uuid.uuid4().hex, email=email, created_at=_now())

    try:
        with _transaction(db_path) as cursor:
            cursor.execute(
                "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                (user.id, user.email, password_hash, user.created_at.isoformat()),
            )
    except PersistenceError as e:
        if isinstance(e.__cause__, sqlite3.IntegrityError):
            raise PersistenceError(f"User already registered: {email}") from e.__cause__
        raise

    logger.info("Registered user %s", email)
    return user


def get_user(user_id: str, db_path: Path | None = None) -> User | None:
    """Get a user by id.

    Raises:
        PersistenceError: If database operation fails.
    """
    with _transaction(db_path) as cursor:
        cursor.execute("SELECT id, email, created_at FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def get_user_credentials(email: str, db_path: Path | None = None) -> tuple[User, str] | None:
    """Get a user and their stored password hash by email.

    Returns:
        Tuple of (user, password_hash), or None if the email is not registered.

    Raises:
        PersistenceError: If database operation fails.
    """
    with _transaction(db_path) as cursor:
        cursor.execute("SELECT id, email, created_at, password_hash FROM users WHERE email = ?", (email,))
        row = cursor.fetchone()
        return (_row_to_user(row), row["password_hash"]) if row else None
