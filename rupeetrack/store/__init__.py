"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from rupeetrack.store.queries import (
    create_transaction,
    create_user,
    delete_transaction,
    get_transaction,
    get_user,
    get_user_credentials,
    list_transactions,
    update_transaction,
)
from rupeetrack.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "create_transaction",
    "create_user",
    "delete_transaction",
    "get_transaction",
    "get_user",
    "get_user_credentials",
    "list_transactions",
    "update_transaction",
]
