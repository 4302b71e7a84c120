"""Account commands: sign up, log in, log out, and show the current user."""

import sys

from rich.console import Console

from rupeetrack.auth import current_user, sign_in, sign_out, sign_up
from rupeetrack.errors import AuthenticationError, PersistenceError

console = Console()


def signup_command(email: str, password: str) -> None:
    """Register a new account."""
    try:
        user = sign_up(email, password)
    except AuthenticationError as e:
        console.print(f"[red]Sign-up failed: {e}[/red]", style="bold")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Registered {user.email}")
    console.print("[dim]Run 'rupeetrack login' to sign in[/dim]")


def login_command(email: str, password: str) -> None:
    """Sign in and remember the session."""
    try:
        session = sign_in(email, password)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except PersistenceError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Welcome back, {session.user.email}!")


def logout_command() -> None:
    """Forget the stored session."""
    sign_out()
    console.print("[green]✓[/green] Signed out")


def whoami_command() -> None:
    """Show the signed-in user."""
    try:
        user = current_user()
    except PersistenceError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if user is None:
        console.print("[yellow]Not signed in[/yellow]")
        sys.exit(1)

    console.print(user.email)
