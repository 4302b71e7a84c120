"""Pure functions for validating and filtering transactions.

This is the ingestion boundary: raw user input (command-line options,
prompts) is turned into well-formed transaction fields here, before it
reaches the store or the aggregation functions. Nothing in this module
touches the database or the console.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TypedDict

import pandas as pd

from rupeetrack.domain.models import (
    EXPENSE_CATEGORIES,
    INCOME,
    INCOME_CATEGORIES,
    TRANSACTION_TYPES,
    CategoryName,
    Transaction,
    TransactionFilters,
    TransactionType,
)
from rupeetrack.errors import ValidationError

CURRENCY_PREFIXES = ("₹", "rs.", "rs", "inr")

# Amounts are whole paise: at most two decimal places, below one trillion
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999999.99")

# Filter value meaning "do not filter on this field"
ALL = "all"


class TransactionFields(TypedDict, total=False):
    """Validated fields for creating or updating a transaction."""

    type: TransactionType
    amount: Decimal
    category: CategoryName
    description: str | None
    date: date


def parse_amount(raw: str | int | float | Decimal) -> Decimal:
    """Parse a non-negative amount.

    Args:
        raw: Amount as entered, e.g. "1,250.50", "₹300" or 42.

    Returns:
        Decimal amount.

    Raises:
        ValidationError: If the value is not a finite, non-negative number with
            at most two decimal places and no larger than MAX_AMOUNT.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid amount: {raw!r}")

    if isinstance(raw, Decimal):
        amount = raw
    elif isinstance(raw, (int, float)):
        amount = Decimal(str(raw))
    else:
        text = raw.strip().lower().replace(",", "")
        for prefix in CURRENCY_PREFIXES:
            if text.startswith(prefix):
                text = text[len(prefix) :].strip()
                break
        try:
            amount = Decimal(text)
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount: {raw!r}") from e

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {raw!r}")
    if amount < 0:
        raise ValidationError("Amount must not be negative")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT:,}")
    if amount.quantize(CENT) != amount:
        raise ValidationError("Amount must have at most two decimal places")
    return amount


def parse_type(raw: str) -> TransactionType:
    """Parse a transaction type ("income" or "expense", any case).

    Raises:
        ValidationError: If the type is not recognised.
    """
    value = raw.strip().lower()
    for txn_type in TRANSACTION_TYPES:
        if value == txn_type:
            return txn_type
    raise ValidationError(f"Invalid type '{raw}'. Use 'income' or 'expense'")


def parse_date(raw: str | date | None, today: date | None = None) -> date:
    """Parse a transaction date.

    ISO dates are read directly; anything else goes through
    pandas.to_datetime with day-first parsing (05/01/2024 is 5 January).

    Args:
        raw: Date as entered. None or empty means today.
        today: Override for the current date.

    Returns:
        Parsed calendar date.

    Raises:
        ValidationError: If the date cannot be parsed.
    """
    if isinstance(raw, date):
        return raw
    if raw is None or not raw.strip():
        return today or date.today()

    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValidationError(f"Could not parse date '{raw}'") from e
    if pd.isna(parsed):
        raise ValidationError(f"Could not parse date '{raw}'")
    return parsed.date()


def normalize_category(raw: str) -> CategoryName:
    """Trim and lower-case a category name.

    Raises:
        ValidationError: If the category is empty.
    """
    value = raw.strip().lower()
    if not value:
        raise ValidationError("Category is required")
    return CategoryName(value)


def normalize_description(raw: str | None) -> str | None:
    """Trim a description; empty descriptions become None."""
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def categories_for(txn_type: TransactionType) -> tuple[str, ...]:
    """Recommended categories for a transaction type."""
    return INCOME_CATEGORIES if txn_type == INCOME else EXPENSE_CATEGORIES


def is_recommended_category(txn_type: TransactionType, category: str) -> bool:
    """Check whether a category is in the recommended set for its type.

    This is advice for the user only. Any category can be stored.
    """
    return category in categories_for(txn_type)


def build_fields(
    txn_type: str | None = None,
    amount: str | int | float | Decimal | None = None,
    category: str | None = None,
    description: str | None = None,
    txn_date: str | date | None = None,
) -> TransactionFields:
    """Validate the provided fields, skipping those left as None.

    Returns:
        TransactionFields holding only the fields that were given.

    Raises:
        ValidationError: If any given field is invalid.
    """
    fields = TransactionFields()
    if txn_type is not None:
        fields["type"] = parse_type(txn_type)
    if amount is not None:
        fields["amount"] = parse_amount(amount)
    if category is not None:
        fields["category"] = normalize_category(category)
    if description is not None:
        fields["description"] = normalize_description(description)
    if txn_date is not None:
        fields["date"] = parse_date(txn_date)
    return fields


def build_new_fields(
    txn_type: str,
    amount: str | int | float | Decimal,
    category: str,
    description: str | None = None,
    txn_date: str | date | None = None,
) -> TransactionFields:
    """Validate the fields of a new transaction. Date defaults to today."""
    fields = build_fields(txn_type, amount, category, description, txn_date)
    fields.setdefault("description", None)
    fields.setdefault("date", parse_date(None))
    return fields


def build_filters(
    txn_type: str | None = None,
    category: str | None = None,
    search: str | None = None,
) -> TransactionFilters:
    """Build list filters. Empty values and "all" mean no filter.

    Raises:
        ValidationError: If txn_type is given but not a valid type.
    """
    type_filter = None
    if txn_type and txn_type.strip().lower() != ALL:
        type_filter = parse_type(txn_type)

    category_filter = None
    if category and category.strip().lower() != ALL:
        category_filter = normalize_category(category)

    search_filter = search.strip() if search and search.strip() else None

    return TransactionFilters(type=type_filter, category=category_filter, search=search_filter)


def find_by_id_prefix(transactions: list[Transaction], prefix: str) -> Transaction:
    """Find the single transaction whose id starts with prefix.

    Lists show shortened ids, so commands accept any unambiguous prefix.

    Raises:
        ValidationError: If no transaction or more than one matches.
    """
    prefix = prefix.strip().lower()
    if not prefix:
        raise ValidationError("Transaction id is required")

    matches = [txn for txn in transactions if txn.id.startswith(prefix)]
    if not matches:
        raise ValidationError(f"Transaction {prefix} not found")
    if len(matches) > 1:
        raise ValidationError(f"Transaction id {prefix} is ambiguous ({len(matches)} matches)")
    return matches[0]


def matches_filters(txn: Transaction, filters: TransactionFilters) -> bool:
    """Check a transaction against list filters.

    The search is a case-insensitive substring match on the description,
    folding case for all Unicode letters. A transaction without a
    description never matches a search.
    """
    if filters.type is not None and txn.type != filters.type:
        return False
    if filters.category is not None and txn.category != filters.category:
        return False
    if filters.search:
        if txn.description is None:
            return False
        if filters.search.casefold() not in txn.description.casefold():
            return False
    return True
