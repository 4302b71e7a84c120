"""Domain models and pure functions for rupeetrack.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Aggregation and validation separated from storage and display
"""

from rupeetrack.domain.models import (
    ALL_CATEGORIES,
    EXPENSE,
    EXPENSE_CATEGORIES,
    INCOME,
    INCOME_CATEGORIES,
    CategoryName,
    Session,
    Transaction,
    TransactionFilters,
    TransactionType,
    User,
)

__all__ = [
    "ALL_CATEGORIES",
    "EXPENSE",
    "EXPENSE_CATEGORIES",
    "INCOME",
    "INCOME_CATEGORIES",
    "CategoryName",
    "Session",
    "Transaction",
    "TransactionFilters",
    "TransactionType",
    "User",
]
