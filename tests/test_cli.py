"""End-to-end tests for the rupeetrack CLI."""

import pytest
from typer.testing import CliRunner

from rupeetrack.auth import current_user
from rupeetrack.cli import app
from rupeetrack.store.queries import list_transactions

runner = CliRunner()


def invoke(*args: str, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


@pytest.fixture
def signed_in() -> None:
    """Initialized database with a signed-in user."""
    assert invoke("init").exit_code == 0
    assert invoke("signup", "asha@example.com", "--password", "password1").exit_code == 0
    assert invoke("login", "asha@example.com", "--password", "password1").exit_code == 0


@pytest.fixture
def example(signed_in: None) -> None:
    """Salary and food in January, rent in February."""
    invoke("add", "--type", "income", "--amount", "1000", "--category", "salary", "--date", "2024-01-05")
    invoke("add", "--amount", "300", "--category", "food", "--date", "2024-01-10", "-d", "Lunch")
    invoke("add", "--amount", "300", "--category", "rent", "--date", "2024-02-01", "-d", "Flat rent")


def own_transactions():
    user = current_user()
    assert user is not None
    return list_transactions(user.id)


class TestInit:
    """Tests for the init command."""

    def test_init_then_refuse_again(self) -> None:
        """Should initialize once and refuse to overwrite without --force."""
        first = invoke("init")
        second = invoke("init")

        assert first.exit_code == 0
        assert "Initialization complete" in first.output
        assert second.exit_code == 1
        assert "already exists" in second.output

    def test_force(self) -> None:
        """Should allow re-initializing with --force."""
        invoke("init")

        assert invoke("init", "--force").exit_code == 0


class TestAccount:
    """Tests for signup, login, logout and whoami."""

    def test_whoami(self, signed_in: None) -> None:
        """Should print the signed-in email."""
        result = invoke("whoami")

        assert result.exit_code == 0
        assert "asha@example.com" in result.output

    def test_logout(self, signed_in: None) -> None:
        """Should sign out."""
        invoke("logout")

        result = invoke("whoami")

        assert result.exit_code == 1
        assert "Not signed in" in result.output

    def test_wrong_password(self, signed_in: None) -> None:
        """Should fail to log in with the wrong password."""
        result = invoke("login", "asha@example.com", "--password", "nope-nope")

        assert result.exit_code == 1
        assert "Invalid email or password" in result.output

    def test_password_prompt(self) -> None:
        """Should prompt for the password twice on sign-up."""
        invoke("init")

        result = invoke("signup", "ravi@example.com", input="password1\npassword1\n")

        assert result.exit_code == 0
        assert "Registered ravi@example.com" in result.output

    def test_requires_login(self) -> None:
        """Should refuse transaction commands when signed out."""
        invoke("init")

        result = invoke("list")

        assert result.exit_code == 1
        assert "Not signed in" in result.output


class TestTransactionCommands:
    """Tests for add, edit, delete and list."""

    def test_add(self, signed_in: None) -> None:
        """Should store the transaction."""
        result = invoke("add", "--amount", "1,250.50", "--category", "Food", "--date", "10/01/2024")

        assert result.exit_code == 0
        assert "Transaction added successfully" in result.output
        [txn] = own_transactions()
        assert str(txn.amount) == "1250.50"
        assert txn.category == "food"
        assert txn.date.isoformat() == "2024-01-10"

    def test_add_invalid_amount(self, signed_in: None) -> None:
        """Should reject a malformed amount."""
        result = invoke("add", "--amount", "lots", "--category", "food")

        assert result.exit_code == 1
        assert "Invalid transaction" in result.output
        assert own_transactions() == []

    def test_add_unusual_category_warns(self, signed_in: None) -> None:
        """Should store but warn about a category from the other type."""
        result = invoke("add", "--type", "income", "--amount", "5", "--category", "food")

        assert result.exit_code == 0
        assert "not a usual" in result.output
        assert len(own_transactions()) == 1

    def test_list_filters(self, example: None) -> None:
        """Should show only matching transactions."""
        result = invoke("list", "--type", "expense", "--search", "lunch")

        assert result.exit_code == 0
        assert "Lunch" in result.output
        assert "Flat rent" not in result.output

    def test_list_no_match(self, example: None) -> None:
        """Should say when nothing matches the filters."""
        result = invoke("list", "--search", "zzz")

        assert "No transactions found matching your filters." in result.output

    def test_list_limit(self, example: None) -> None:
        """Should show at most --limit transactions, newest first."""
        result = invoke("list", "--limit", "1")

        assert result.exit_code == 0
        assert "Flat rent" in result.output
        assert "Lunch" not in result.output

    @pytest.mark.parametrize("limit", ["0", "-1"])
    def test_list_limit_below_one(self, example: None, limit: str) -> None:
        """Should reject a limit below one as a usage error."""
        result = invoke("list", "--limit", limit)

        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Add your first one!" not in result.output

    def test_list_search_non_ascii(self, signed_in: None) -> None:
        """Should match descriptions regardless of the case of accented letters."""
        invoke("add", "--amount", "120", "--category", "food", "-d", "Café ÉCLAIR")

        result = invoke("list", "--search", "éclair")

        assert result.exit_code == 0
        assert "No transactions found" not in result.output

    def test_list_help_names_categories(self) -> None:
        """Should list the known categories in the --category help."""
        result = invoke("list", "--help")

        assert result.exit_code == 0
        assert "salary" in result.output
        assert "medical" in result.output

    def test_add_huge_amount(self, signed_in: None) -> None:
        """Should reject an amount too large to store and report."""
        result = invoke("add", "--amount", "1e30", "--category", "food")

        assert result.exit_code == 1
        assert "Invalid transaction" in result.output
        assert own_transactions() == []

    def test_edit(self, example: None) -> None:
        """Should update the given fields by shortened id."""
        food = next(txn for txn in own_transactions() if txn.category == "food")

        result = invoke("edit", food.id[:8], "--amount", "450")

        assert result.exit_code == 0
        updated = next(txn for txn in own_transactions() if txn.id == food.id)
        assert str(updated.amount) == "450"

    def test_edit_unknown_id(self, example: None) -> None:
        """Should fail for an id that does not exist."""
        result = invoke("edit", "ffffffff", "--amount", "1")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_confirmed(self, example: None) -> None:
        """Should delete after confirmation."""
        rent = next(txn for txn in own_transactions() if txn.category == "rent")

        result = invoke("delete", rent.id, input="y\n")

        assert result.exit_code == 0
        assert "Transaction deleted" in result.output
        assert all(txn.id != rent.id for txn in own_transactions())

    def test_delete_cancelled(self, example: None) -> None:
        """Should keep the transaction when not confirmed."""
        rent = next(txn for txn in own_transactions() if txn.category == "rent")

        result = invoke("delete", rent.id, input="n\n")

        assert "Cancelled" in result.output
        assert any(txn.id == rent.id for txn in own_transactions())

    def test_delete_yes(self, example: None) -> None:
        """Should delete without asking when --yes is given."""
        rent = next(txn for txn in own_transactions() if txn.category == "rent")

        assert invoke("delete", rent.id, "--yes").exit_code == 0
        assert len(own_transactions()) == 2


class TestReports:
    """Tests for dashboard and analytics."""

    def test_dashboard(self, example: None) -> None:
        """Should show totals and quick stats."""
        result = invoke("dashboard")

        assert result.exit_code == 0
        assert "₹400.00" in result.output
        assert "Top spending category: food" in result.output
        assert "Savings rate: 40%" in result.output

    def test_dashboard_empty(self, signed_in: None) -> None:
        """Should handle a user without transactions."""
        result = invoke("dashboard")

        assert result.exit_code == 0
        assert "Top spending category: None" in result.output
        assert "Savings rate: 0%" in result.output

    def test_analytics(self, example: None) -> None:
        """Should show category shares and monthly totals."""
        result = invoke("analytics")

        assert result.exit_code == 0
        assert "Jan" in result.output
        assert "Feb" in result.output
        assert "(50.0%)" in result.output

    def test_analytics_by_year(self, example: None) -> None:
        """Should label months with their year when asked."""
        result = invoke("analytics", "--by-year")

        assert "Jan 2024" in result.output

    def test_analytics_empty(self, signed_in: None) -> None:
        """Should say there is nothing to chart."""
        result = invoke("analytics")

        assert result.exit_code == 0
        assert "No expense data to display" in result.output
        assert "No monthly data to display" in result.output
