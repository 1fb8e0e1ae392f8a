"""Tests for the command-line interface."""

import io
import json

import pytest

from ledger.cli import main


class Runner:
    """Runs the CLI against the test database and captures its output."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def __call__(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        code = main(list(argv), session_factory=self.session_factory, out=out, err=err)
        return code, out.getvalue(), err.getvalue()

    def json(self, *argv):
        code, out, err = self(*argv, "--json")
        assert code == 0, err
        return json.loads(out)


@pytest.fixture
def cli(session_factory):
    return Runner(session_factory)


class TestCategoryCommands:

    def test_add_and_list(self, cli, user):
        created = cli.json("category", "add", user.id, "Food", "expense")
        assert created["name"] == "Food"
        assert created["userId"] == user.id

        code, out, _ = cli("category", "list", user.id)
        assert code == 0
        assert f"ID: {created['id']}, Name: Food, Type: expense" in out

    def test_list_type_filter(self, cli, user):
        cli.json("category", "add", user.id, "Rent", "expense")
        cli.json("category", "add", user.id, "Salary", "income")

        income = cli.json("category", "list", user.id, "--type", "income")
        assert [c["name"] for c in income] == ["Salary"]

    def test_update(self, cli, user):
        created = cli.json("category", "add", user.id, "Old", "expense")
        updated = cli.json("category", "update", created["id"], user.id, "--name", "New")
        assert updated["name"] == "New"
        assert updated["type"] == "expense"

    def test_update_without_changes_fails(self, cli, user):
        created = cli.json("category", "add", user.id, "Old", "expense")
        code, _, err = cli("category", "update", created["id"], user.id)
        assert code == 1
        assert "No updates provided" in err

    def test_delete_missing_exits_nonzero(self, cli, user):
        code, _, err = cli("category", "delete", "missing", user.id)
        assert code == 1
        assert "not found" in err

    def test_delete_in_use_exits_nonzero(self, cli, user):
        category = cli.json("category", "add", user.id, "Food", "expense")
        cli.json("transaction", "add", user.id, "5", "expense", "2023-10-01", "-c", category["id"])

        code, _, err = cli("category", "delete", category["id"], user.id)
        assert code == 1
        assert "existing transactions" in err

    def test_storage_error_exits_nonzero(self, cli, user):
        code, out, err = cli("category", "add", "ghost-user", "Food", "expense")
        assert code == 1
        assert out == ""
        assert err.startswith("Error: ")
        assert "FOREIGN KEY" in err

        assert cli.json("category", "list", user.id) == []


class TestTransactionCommands:

    def test_add_list_update_delete(self, cli, user):
        created = cli.json("transaction", "add", user.id, "12.50", "expense", "2023-10-01",
                           "-d", "Lunch")
        assert created["amount"] == "12.50"
        assert created["description"] == "Lunch"

        listed = cli.json("transaction", "list", user.id, "-s", "2023-10-01", "-e", "2023-10-31")
        assert [t["id"] for t in listed] == [created["id"]]

        updated = cli.json("transaction", "update", created["id"], user.id, "-D", "null")
        assert updated["description"] is None
        assert updated["amount"] == "12.50"

        code, out, _ = cli("transaction", "delete", created["id"], user.id)
        assert code == 0
        assert "deleted successfully" in out
        assert cli.json("transaction", "list", user.id) == []

    def test_invalid_amount_exits_nonzero(self, cli, user):
        code, _, err = cli("transaction", "add", user.id, "-5", "expense", "2023-10-01")
        assert code == 1
        assert "amount must be positive" in err

    def test_amount_precision_message(self, cli, user):
        code, _, err = cli("transaction", "add", user.id, "12.345", "expense", "2023-10-01")
        assert code == 1
        assert err.strip() == "Error: amount must have at most 2 decimal places"

    def test_other_user_cannot_delete(self, cli, user, other_user):
        created = cli.json("transaction", "add", user.id, "1", "expense", "2023-10-01")
        code, _, err = cli("transaction", "delete", created["id"], other_user.id)
        assert code == 1
        assert "not found" in err


class TestSummaryCommand:

    def test_october_summary(self, cli, user):
        food = cli.json("category", "add", user.id, "Food", "expense")
        cli.json("transaction", "add", user.id, "50", "expense", "2023-10-01", "-c", food["id"])
        cli.json("transaction", "add", user.id, "30", "expense", "2023-10-02", "-c", food["id"])
        cli.json("transaction", "add", user.id, "500", "income", "2023-10-01")

        report = cli.json("summary", user.id, "2023-10-01", "2023-10-31")
        assert report["summary"] == {
            "totalIncome": "500.00",
            "totalExpense": "80.00",
            "balance": "420.00",
        }
        assert report["spendingByCategory"] == [
            {"categoryName": "Food", "categoryType": "expense", "totalAmount": "80.00"},
        ]

        code, out, _ = cli("summary", user.id, "2023-10-01", "2023-10-31")
        assert code == 0
        assert "Balance: 420.00" in out
        assert "- Food (expense): 80.00" in out

    def test_empty_period(self, cli, user):
        code, out, _ = cli("summary", user.id, "2023-10-01", "2023-10-31")
        assert code == 0
        assert "No spending found for this period." in out

    def test_bad_date_exits_nonzero(self, cli, user):
        code, _, err = cli("summary", user.id, "yesterday", "2023-10-31")
        assert code == 1
        assert "Invalid date" in err
