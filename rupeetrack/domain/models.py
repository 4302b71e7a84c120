"""Domain type definitions for rupeetrack.

These types describe the records read from the store and the summaries
derived from them:
- Transaction: a single income or expense entry owned by one user
- User / Session: identity of the signed-in user
- TransactionFilters: optional filters applied when listing transactions

Amounts are Decimal quantities, currency-agnostic. Formatting with a
currency symbol happens only at display time.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, NewType

TransactionType = Literal["income", "expense"]

INCOME: TransactionType = "income"
EXPENSE: TransactionType = "expense"
TRANSACTION_TYPES: tuple[TransactionType, ...] = (INCOME, EXPENSE)

# Category name, drawn from a recommended set per transaction type
CategoryName = NewType("CategoryName", str)

# Recommended categories. Advisory only: the store accepts any category.
INCOME_CATEGORIES: tuple[str, ...] = ("salary", "freelance", "business", "others")
EXPENSE_CATEGORIES: tuple[str, ...] = (
    "food",
    "rent",
    "transport",
    "shopping",
    "bills",
    "entertainment",
    "medical",
    "education",
    "others",
)
ALL_CATEGORIES: tuple[str, ...] = tuple(dict.fromkeys(INCOME_CATEGORIES + EXPENSE_CATEGORIES))


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record."""

    id: str
    user_id: str
    type: TransactionType
    amount: Decimal
    category: CategoryName
    description: str | None
    date: date
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Immutable user identity."""

    id: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class Session:
    """Signed-in user, passed explicitly to anything that needs identity."""

    user: User
    started_at: datetime


@dataclass(frozen=True)
class TransactionFilters:
    """Optional list filters. None means no filtering on that field."""

    type: TransactionType | None = None
    category: CategoryName | None = None
    search: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.type is None and self.category is None and not self.search
