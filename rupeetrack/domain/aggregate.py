"""Pure functions for transaction aggregation.

This module contains the functional core for analytics:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Every function is recomputed from the full input sequence on each call
and returns fresh summary objects. Amounts are summed with Decimal
addition; only percentages are floats.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from rupeetrack.dates import month_label
from rupeetrack.domain.models import EXPENSE, INCOME, CategoryName, Transaction

ZERO = Decimal(0)


@dataclass(frozen=True)
class CategoryTotal:
    """Total expense amount for one category."""

    name: CategoryName
    value: Decimal


@dataclass(frozen=True)
class MonthlyTotal:
    """Income and expense totals for one month label."""

    month: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class TopCategory:
    """Category ranking entry with its share of all expenses.

    percentage_of_total is None when total expenses are zero.
    """

    category: CategoryName
    amount: Decimal
    percentage_of_total: float | None


@dataclass(frozen=True)
class BalanceSummary:
    """Income, expense, balance and savings rate."""

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    savings_rate_percent: int


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Sum expenses per category.

    Args:
        transactions: Any sequence of transactions. Income is ignored.

    Returns:
        One CategoryTotal per distinct expense category, sorted by value
        descending. Equal values keep the order in which the category was
        first seen in the input.
    """
    totals: dict[CategoryName, Decimal] = {}
    for txn in transactions:
        if txn.type != EXPENSE:
            continue
        totals[txn.category] = totals.get(txn.category, ZERO) + txn.amount

    # sorted() is stable, dict preserves first-seen order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(name=name, value=value) for name, value in ranked]


def monthly_breakdown(transactions: Iterable[Transaction], year_aware: bool = False) -> list[MonthlyTotal]:
    """Sum income and expense per month label.

    With the default labels ("Jan", "Feb", ...) the same month of different
    years falls into one bucket. Pass year_aware=True to keep years apart.

    Args:
        transactions: Any sequence of transactions.
        year_aware: Label months as "Jan 2024" instead of "Jan".

    Returns:
        One MonthlyTotal per label, in order of first appearance in the input.
    """
    income: dict[str, Decimal] = {}
    expense: dict[str, Decimal] = {}
    for txn in transactions:
        label = month_label(txn.date, year_aware)
        income.setdefault(label, ZERO)
        expense.setdefault(label, ZERO)
        if txn.type == INCOME:
            income[label] += txn.amount
        else:
            expense[label] += txn.amount

    return [MonthlyTotal(month=label, income=income[label], expense=expense[label]) for label in income]


def top_categories(totals: Sequence[CategoryTotal], n: int) -> list[TopCategory]:
    """Take the first n category totals with their percentage share.

    The denominator is the sum over the whole of totals, not just the
    first n, so the returned percentages need not add up to 100.

    Args:
        totals: Output of category_breakdown (sorted descending).
        n: Maximum number of entries to return.

    Returns:
        Up to n TopCategory entries. percentage_of_total is None when the
        overall total is zero.
    """
    if n <= 0:
        return []

    grand_total = sum((entry.value for entry in totals), ZERO)

    result = []
    for entry in totals[:n]:
        percentage = float(entry.value / grand_total * 100) if grand_total != 0 else None
        result.append(TopCategory(category=entry.name, amount=entry.value, percentage_of_total=percentage))
    return result


def calculate_savings_rate(total_income: Decimal, total_expense: Decimal) -> int:
    """Percentage of income kept after expenses, rounded half away from zero.

    Returns:
        0 when there is no income, otherwise round((income - expense) / income * 100).
    """
    if total_income <= 0:
        return 0
    rate = (total_income - total_expense) / total_income * 100
    with localcontext() as ctx:
        # quantize needs one digit of precision per integer digit
        ctx.prec = max(ctx.prec, rate.adjusted() + 2)
        return int(rate.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def balance_summary(transactions: Iterable[Transaction]) -> BalanceSummary:
    """Total income, total expense, balance and savings rate.

    Args:
        transactions: Any sequence of transactions.

    Returns:
        BalanceSummary where balance is exactly total_income - total_expense.
    """
    total_income = ZERO
    total_expense = ZERO
    for txn in transactions:
        if txn.type == INCOME:
            total_income += txn.amount
        elif txn.type == EXPENSE:
            total_expense += txn.amount

    return BalanceSummary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        savings_rate_percent=calculate_savings_rate(total_income, total_expense),
    )


def top_spending_category(transactions: Iterable[Transaction]) -> CategoryName | None:
    """Category with the largest expense total, or None without expenses."""
    breakdown = category_breakdown(transactions)
    if not breakdown:
        return None
    return breakdown[0].name
