"""Pure functions for formatting report values.

No console output here: these helpers only turn amounts and percentages
into display strings and bar lengths for the commands to print.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from rupeetrack.domain.models import INCOME, Transaction

DEFAULT_CURRENCY_SYMBOL = "₹"


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format an amount with currency symbol, grouped thousands and two decimals.

    Args:
        amount: Amount to format.
        symbol: Currency symbol prefix.

    Returns:
        Formatted string (e.g., "₹1,234.50" or "-₹20.00").
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        rounded = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_signed_amount(txn: Transaction, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format a transaction amount with + for income and - for expense."""
    sign = "+" if txn.type == INCOME else "-"
    return f"{sign}{format_currency(txn.amount, symbol)}"


def format_percentage(percentage: float | None, digits: int = 1) -> str:
    """Format a percentage, or "-" when it is undefined."""
    if percentage is None:
        return "-"
    return f"{percentage:.{digits}f}%"


def calculate_bar_length(amount: Decimal, max_amount: Decimal, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int(abs(amount) / max_amount * bar_width)
