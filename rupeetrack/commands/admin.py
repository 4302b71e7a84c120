"""Admin commands for initializing the database and configuration."""

import sys
from pathlib import Path

from rich.console import Console

from rupeetrack.config import create_default_config, get_config_path
from rupeetrack.errors import PersistenceError
from rupeetrack.store.schema import get_db_path, init_database

console = Console()


def run_full_init(db_path: Path, config_path: Path, write_config: bool) -> None:
    """Initialize database and, if requested, a default config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    if write_config:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize rupeetrack database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'rupeetrack init --force' to reset the config and update the schema[/yellow]")
            sys.exit(1)

        # The schema is created idempotently, so --force never drops data
        run_full_init(db_path, config_path, write_config=force or not config_exists)

    except PersistenceError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
