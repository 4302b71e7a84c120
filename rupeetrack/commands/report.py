"""Dashboard and analytics commands for viewing summaries."""

import sys

from rich.console import Console
from rich.table import Table

from rupeetrack.auth import require_session
from rupeetrack.commands.transactions import render_transaction_table
from rupeetrack.config import load_config
from rupeetrack.domain.aggregate import (
    CategoryTotal,
    MonthlyTotal,
    TopCategory,
    balance_summary,
    category_breakdown,
    monthly_breakdown,
    top_categories,
    top_spending_category,
)
from rupeetrack.domain.report import calculate_bar_length, format_currency, format_percentage
from rupeetrack.errors import AuthenticationError, PersistenceError
from rupeetrack.store.queries import list_transactions

console = Console()

BAR_WIDTH = 30


def render_expense_distribution(totals: list[CategoryTotal], symbol: str) -> None:
    """Print expenses per category with share and histogram bar."""
    console.print("[bold red]Expense distribution[/bold red]\n")
    if not totals:
        console.print("  [dim]No expense data to display[/dim]\n")
        return

    shares = {entry.category: entry.percentage_of_total for entry in top_categories(totals, len(totals))}
    max_amount = totals[0].value
    for entry in totals:
        bar = "█" * calculate_bar_length(entry.value, max_amount, BAR_WIDTH)
        share = format_percentage(shares[entry.name], digits=0)
        console.print(f"  {entry.name:15} {format_currency(entry.value, symbol):>14} {share:>5} {bar}")
    console.print()


def render_monthly_overview(months: list[MonthlyTotal], symbol: str) -> None:
    """Print monthly income against expense."""
    console.print("[bold cyan]Monthly overview[/bold cyan]\n")
    if not months:
        console.print("  [dim]No monthly data to display[/dim]\n")
        return

    table = Table()
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    for month in months:
        table.add_row(month.month, format_currency(month.income, symbol), format_currency(month.expense, symbol))
    console.print(table)
    console.print()


def render_top_categories(top: list[TopCategory], symbol: str) -> None:
    """Print the top spending categories with their share of all expenses."""
    console.print("[bold magenta]Top spending categories[/bold magenta]\n")
    if not top:
        console.print("  [dim]No expense data to display[/dim]\n")
        return

    for entry in top:
        percentage = format_percentage(entry.percentage_of_total)
        console.print(f"  {entry.category:15} {format_currency(entry.amount, symbol):>14} ({percentage})")
        if entry.percentage_of_total is not None:
            bar_length = int(entry.percentage_of_total / 100 * BAR_WIDTH)
            console.print(f"  [dim]{'█' * bar_length}[/dim]")
    console.print()


def dashboard_command() -> None:
    """Show balance, totals, recent transactions and quick stats."""
    config = load_config()
    symbol = config["currency_symbol"]
    recent_limit = config["dashboard"]["recent_limit"]

    try:
        session = require_session()
        recent = list_transactions(session.user.id, limit=recent_limit)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Error fetching transactions: {e}[/red]", style="bold")
        sys.exit(1)

    # Figures cover the recent transactions shown below, not all history
    summary = balance_summary(recent)
    top = top_spending_category(recent)

    console.print(f"[bold]Welcome back, {session.user.email}[/bold]\n")
    console.print(f"  [bold]Total balance:[/bold]  {format_currency(summary.balance, symbol)}")
    console.print(f"  [bold green]Income:[/bold green]         {format_currency(summary.total_income, symbol)}")
    console.print(f"  [bold red]Expenses:[/bold red]       {format_currency(summary.total_expense, symbol)}\n")

    if recent:
        console.print(render_transaction_table(recent, "Recent Transactions", symbol))
    else:
        console.print("[dim]No transactions found. Add your first one![/dim]")

    console.print("\n[bold]Quick Stats[/bold]")
    console.print(f"  Top spending category: {top or 'None'}")
    console.print(f"  Savings rate: {summary.savings_rate_percent}%")


def analytics_command(by_year: bool | None = None, top: int | None = None) -> None:
    """Show expense distribution, monthly overview and top categories."""
    config = load_config()
    symbol = config["currency_symbol"]
    year_aware = config["analytics"]["year_aware_months"] if by_year is None else by_year
    top_n = config["analytics"]["top_categories"] if top is None else top

    try:
        session = require_session()
        transactions = list_transactions(session.user.id, ascending=True)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Error fetching transactions: {e}[/red]", style="bold")
        sys.exit(1)

    totals = category_breakdown(transactions)
    months = monthly_breakdown(transactions, year_aware=year_aware)

    console.print("[bold]Financial Analytics[/bold]\n")
    render_expense_distribution(totals, symbol)
    render_monthly_overview(months, symbol)
    render_top_categories(top_categories(totals, top_n), symbol)
