"""Shared fixtures.

Every test gets its own XDG directories so the database, config and
session file never touch the real home directory.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from rupeetrack.domain.models import CategoryName, Transaction
from rupeetrack.store.schema import get_db_path, init_database


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point all XDG locations at the test's temporary directory."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("RUPEETRACK_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def db_path() -> Path:
    """Initialized database at the default (isolated) location."""
    path = get_db_path()
    init_database(path)
    return path


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Factory for in-memory transactions."""
    counter = iter(range(1, 10_000))

    def _make(
        txn_type: str,
        amount: str | int,
        category: str,
        day: str,
        description: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=f"txn{next(counter)}",
            user_id="user1",
            type=txn_type,  # type: ignore[arg-type]
            amount=Decimal(str(amount)),
            category=CategoryName(category),
            description=description,
            date=date.fromisoformat(day),
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    return _make
