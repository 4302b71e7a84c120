"""Transaction management commands (add, edit, delete, list)."""

import sys

import typer
from rich.console import Console
from rich.table import Table

from rupeetrack.auth import require_session
from rupeetrack.config import load_config
from rupeetrack.dates import format_display_date
from rupeetrack.domain.models import INCOME, Session, Transaction
from rupeetrack.domain.report import format_signed_amount
from rupeetrack.domain.transactions import (
    build_fields,
    build_filters,
    build_new_fields,
    categories_for,
    find_by_id_prefix,
    is_recommended_category,
)
from rupeetrack.errors import AuthenticationError, PersistenceError, ValidationError
from rupeetrack.store.queries import (
    create_transaction,
    delete_transaction,
    list_transactions,
    update_transaction,
)

console = Console()

SHORT_ID_LENGTH = 8


def short_id(txn: Transaction) -> str:
    """Shortened id shown in tables."""
    return txn.id[:SHORT_ID_LENGTH]


def warn_unusual_category(txn: Transaction) -> None:
    """Warn when a category is outside the recommended set for its type."""
    if not is_recommended_category(txn.type, txn.category):
        suggested = ", ".join(categories_for(txn.type))
        console.print(f"[yellow]Note: '{txn.category}' is not a usual {txn.type} category ({suggested})[/yellow]")


def resolve_transaction(session: Session, txn_id: str) -> Transaction:
    """Find one of the session user's transactions by full or shortened id."""
    return find_by_id_prefix(list_transactions(session.user.id), txn_id)


def render_transaction_table(transactions: list[Transaction], title: str, symbol: str) -> Table:
    """Build the transactions table."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in transactions:
        color = "green" if txn.type == INCOME else "red"
        table.add_row(
            short_id(txn),
            format_display_date(txn.date),
            txn.description or "-",
            txn.category,
            f"[{color}]{format_signed_amount(txn, symbol)}[/{color}]",
        )

    return table


def add_command(
    txn_type: str,
    amount: str,
    category: str,
    description: str | None = None,
    date: str | None = None,
) -> None:
    """Record a new income or expense transaction."""
    try:
        session = require_session()
        fields = build_new_fields(txn_type, amount, category, description, date)
        txn = create_transaction(session.user.id, fields)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid transaction: {e}[/red]")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Failed to add transaction: {e}[/red]", style="bold")
        sys.exit(1)

    symbol = load_config()["currency_symbol"]
    console.print("[green]✓[/green] Transaction added successfully!")
    console.print(f"  ID: {short_id(txn)}")
    console.print(f"  Date: {format_display_date(txn.date)}")
    console.print(f"  Description: {txn.description or '-'}")
    console.print(f"  Category: {txn.category}")
    console.print(f"  Amount: {format_signed_amount(txn, symbol)}")
    warn_unusual_category(txn)


def edit_command(
    txn_id: str,
    txn_type: str | None = None,
    amount: str | None = None,
    category: str | None = None,
    description: str | None = None,
    date: str | None = None,
) -> None:
    """Change fields of an existing transaction."""
    try:
        session = require_session()
        fields = build_fields(txn_type, amount, category, description, date)
        if not fields:
            console.print("[yellow]Nothing to change[/yellow]")
            return
        existing = resolve_transaction(session, txn_id)
        txn = update_transaction(session.user.id, existing.id, fields)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Failed to update transaction: {e}[/red]", style="bold")
        sys.exit(1)

    symbol = load_config()["currency_symbol"]
    console.print(f"[green]✓[/green] Transaction {short_id(txn)} updated successfully!")
    console.print(f"  Date: {format_display_date(txn.date)}")
    console.print(f"  Description: {txn.description or '-'}")
    console.print(f"  Category: {txn.category}")
    console.print(f"  Amount: {format_signed_amount(txn, symbol)}")
    warn_unusual_category(txn)


def delete_command(txn_id: str, yes: bool = False) -> None:
    """Delete a transaction after confirmation."""
    try:
        session = require_session()
        txn = resolve_transaction(session, txn_id)

        if not yes:
            symbol = load_config()["currency_symbol"]
            summary = f"{format_display_date(txn.date)} {txn.description or '-'} {format_signed_amount(txn, symbol)}"
            console.print(summary)
            if not typer.confirm("Are you sure you want to delete this transaction?", default=False):
                console.print("[dim]Cancelled[/dim]")
                return

        delete_transaction(session.user.id, txn.id)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Failed to delete transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction deleted")


def list_command(
    txn_type: str = "all",
    category: str = "all",
    search: str | None = None,
    oldest_first: bool = False,
    limit: int | None = None,
) -> None:
    """List transactions matching the filters."""
    try:
        session = require_session()
        filters = build_filters(txn_type, category, search)
        transactions = list_transactions(session.user.id, filters, ascending=oldest_first, limit=limit)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Failed to fetch transactions: {e}[/red]", style="bold")
        sys.exit(1)

    if not transactions:
        if filters.is_empty:
            console.print("[yellow]No transactions found. Add your first one![/yellow]")
        else:
            console.print("[yellow]No transactions found matching your filters.[/yellow]")
        return

    symbol = load_config()["currency_symbol"]
    console.print(render_transaction_table(transactions, f"Transactions ({len(transactions)})", symbol))
