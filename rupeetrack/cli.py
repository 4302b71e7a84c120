"""CLI entry point for rupeetrack."""

from typing import Optional

import typer

from rupeetrack.commands.account import login_command, logout_command, signup_command, whoami_command
from rupeetrack.commands.admin import init_command
from rupeetrack.commands.report import analytics_command, dashboard_command
from rupeetrack.commands.transactions import add_command, delete_command, edit_command, list_command
from rupeetrack.config import load_config
from rupeetrack.domain.models import ALL_CATEGORIES
from rupeetrack.logging_setup import configure_logging

app = typer.Typer(
    name="rupeetrack",
    help="RupeeTrack - track your income and expenses",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """RupeeTrack - track your income and expenses."""
    configure_logging("DEBUG" if verbose else load_config()["log_level"])


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config and update the database schema"),
) -> None:
    """Initialize rupeetrack database and configuration."""
    init_command(force)


@app.command()
def signup(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Account password"),
) -> None:
    """Create your account."""
    signup_command(email, password)


@app.command()
def login(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Sign in to your account."""
    login_command(email, password)


@app.command()
def logout() -> None:
    """Sign out."""
    logout_command()


@app.command()
def whoami() -> None:
    """Show the signed-in account."""
    whoami_command()


@app.command()
def add(
    txn_type: str = typer.Option("expense", "--type", "-t", help="'income' or 'expense'"),
    amount: str = typer.Option(..., "--amount", "-a", help="Amount (e.g. 250 or 1,250.50)"),
    category: str = typer.Option(..., "--category", "-c", help="Category (e.g. food, salary)"),
    description: str = typer.Option(None, "--description", "-d", help="Optional description"),
    date: str = typer.Option(None, "--date", help="Date (YYYY-MM-DD or DD/MM/YYYY, default: today)"),
) -> None:
    """Add an income or expense transaction."""
    add_command(txn_type, amount, category, description, date)


@app.command()
def edit(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (as shown by 'rupeetrack list')"),
    txn_type: str = typer.Option(None, "--type", "-t", help="'income' or 'expense'"),
    amount: str = typer.Option(None, "--amount", "-a", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    description: str = typer.Option(None, "--description", "-d", help="New description (empty to clear)"),
    date: str = typer.Option(None, "--date", help="New date"),
) -> None:
    """Edit a transaction."""
    edit_command(txn_id, txn_type, amount, category, description, date)


@app.command()
def delete(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (as shown by 'rupeetrack list')"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking"),
) -> None:
    """Delete a transaction."""
    delete_command(txn_id, yes)


@app.command(name="list")
def list_transactions(
    txn_type: str = typer.Option("all", "--type", "-t", help="'all', 'income' or 'expense'"),
    category: str = typer.Option("all", "--category", "-c", help=f"Category or 'all' ({', '.join(ALL_CATEGORIES)})"),
    search: str = typer.Option(None, "--search", "-s", help="Search descriptions"),
    oldest_first: bool = typer.Option(False, "--oldest-first", help="Show oldest transactions first"),
    limit: int = typer.Option(None, "--limit", "-n", min=1, help="Maximum transactions to show"),
) -> None:
    """List your transactions."""
    list_command(txn_type, category, search, oldest_first, limit)


@app.command()
def dashboard() -> None:
    """Show your balance, recent transactions and quick stats."""
    dashboard_command()


@app.command()
def analytics(
    by_year: Optional[bool] = typer.Option(
        None, "--by-year/--by-month-name", help="Keep the same month of different years apart (default from config)"
    ),
    top: int = typer.Option(None, "--top", help="Number of top spending categories (default from config)"),
) -> None:
    """Show spending by category and income vs expense by month."""
    analytics_command(by_year, top)


if __name__ == "__main__":
    app()
