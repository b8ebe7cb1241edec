"""Tests for CLI commands."""

import json
from decimal import Decimal

import pytest
from spendtrack.cli.main import cli
from spendtrack.domain.tracker import ExpenseTracker


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def run(*args):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])

    return run


def reload(temp_db) -> ExpenseTracker:
    return ExpenseTracker.load(temp_db)


def test_help_does_not_need_database(cli_runner):
    """Test top-level help works without opening a database."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Expense tracking" in result.output


def test_add_expense_minimal(invoke, temp_db):
    """Test adding an expense in the primary currency."""
    result = invoke("add", "--amount", "250")

    assert result.exit_code == 0
    assert "Created expense" in result.output
    assert "250.00 ₽" in result.output

    expenses = reload(temp_db).expenses
    assert len(expenses) == 1
    assert expenses[0].primary_amount == Decimal("250")


def test_add_expense_full(invoke, temp_db):
    """Test adding an expense with every option."""
    invoke("rate", "record", "USD", "RUB", "0.5")
    result = invoke(
        "add",
        "--amount", "12.50",
        "--currency", "usd",
        "--category", "Transport",
        "--description", "Taxi",
        "--date", "2024-05-02",
    )

    assert result.exit_code == 0
    assert "Transport" in result.output
    assert "Taxi" in result.output
    assert "25.00 ₽" in result.output

    expense = reload(temp_db).expenses[0]
    assert expense.date.date().isoformat() == "2024-05-02"
    assert expense.primary_amount == Decimal("25")


def test_add_expense_warns_without_rate(invoke):
    """Test an expense in a currency without a rate is flagged."""
    result = invoke("add", "--amount", "10", "--currency", "EUR")
    assert result.exit_code == 0
    assert "assumed 1:1" in result.output


@pytest.mark.parametrize(
    "args,message",
    [
        (["--amount", "abc"], "Invalid amount"),
        (["--amount", "-5"], "Invalid amount"),
        (["--amount", "5", "--currency", "XYZ"], "Currency 'XYZ' not found"),
        (["--amount", "5", "--category", "Yachts"], "Category 'Yachts' not found"),
        (["--amount", "5", "--date", "someday"], "Invalid date format"),
    ],
)
def test_add_expense_invalid(invoke, temp_db, args, message):
    """Test invalid input exits with an error and records nothing."""
    result = invoke("add", *args)

    assert result.exit_code == 1
    assert message in result.output
    assert temp_db.load_state() is None


def test_delete_expense(invoke, temp_db):
    """Test deleting an existing and an unknown expense."""
    invoke("add", "--amount", "10")
    expense_id = reload(temp_db).expenses[0].id

    result = invoke("delete", "missing")
    assert result.exit_code == 0
    assert "No expense with ID missing" in result.output
    assert len(reload(temp_db).expenses) == 1

    result = invoke("delete", expense_id)
    assert result.exit_code == 0
    assert f"Deleted expense {expense_id}" in result.output
    assert reload(temp_db).expenses == ()


def test_view_groups_by_day(invoke):
    """Test view lists day groups newest first with live conversions."""
    invoke("rate", "record", "USD", "RUB", "0.5")
    invoke("add", "--amount", "100", "--description", "Market", "--date", "2024-05-01")
    invoke("add", "--amount", "50", "--currency", "USD", "--description", "Book", "--date", "2024-05-02")

    result = invoke("view")
    assert result.exit_code == 0
    assert "Total: 200.00 ₽" in result.output
    assert result.output.index("2.5.2024") < result.output.index("1.5.2024")
    assert "≈ 100.00 ₽" in result.output


def test_view_verbose_shows_snapshot(invoke):
    """Test verbose view shows the recorded primary amount next to the live one."""
    invoke("rate", "record", "USD", "RUB", "0.5")
    invoke("add", "--amount", "50", "--currency", "USD")
    invoke("rate", "record", "USD", "RUB", "1.5")

    result = invoke("view", "--verbose")
    assert "≈ 50.00 ₽" in result.output
    assert "Recorded as: 100.00" in result.output


def test_view_empty(invoke):
    """Test viewing with no expenses."""
    result = invoke("view")
    assert result.exit_code == 0
    assert "No expenses found." in result.output


def test_total(invoke):
    """Test the total command with category breakdown."""
    invoke("add", "--amount", "10", "--category", "Groceries")
    invoke("add", "--amount", "30", "--category", "Bills")
    invoke("add", "--amount", "5", "--currency", "EUR")

    result = invoke("total", "--by-category")
    assert result.exit_code == 0
    assert "Total: 45.00 ₽" in result.output
    assert "Bills" in result.output
    assert "no rate known for EUR" in result.output


def test_currency_commands(invoke, temp_db):
    """Test adding a currency and making it primary."""
    result = invoke("currency", "add", "gbp", "£", "Pound Sterling")
    assert result.exit_code == 0
    assert "Added currency GBP" in result.output

    result = invoke("currency", "primary", "GBP")
    assert result.exit_code == 0

    result = invoke("currency", "list")
    assert "* GBP" in result.output
    assert reload(temp_db).primary_currency.code == "GBP"


def test_currency_add_empty_field(invoke):
    """Test an empty currency field is rejected."""
    result = invoke("currency", "add", "GBP", "", "Pound")
    assert result.exit_code == 1
    assert "required" in result.output


def test_currency_primary_unknown(invoke):
    """Test making an unknown currency primary fails."""
    result = invoke("currency", "primary", "XYZ")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_rate_record_and_list(invoke, temp_db):
    """Test recording rates shows the running average."""
    invoke("rate", "record", "USD", "RUB", "90")
    result = invoke("rate", "record", "usd", "rub", "94")
    assert result.exit_code == 0
    assert "1 USD = 92 RUB" in result.output

    result = invoke("rate", "list")
    assert "2 observation(s)" in result.output
    assert reload(temp_db).resolve_rate("RUB", "USD") == Decimal(1) / Decimal(92)


def test_rate_record_invalid(invoke):
    """Test a non-positive rate is rejected."""
    result = invoke("rate", "record", "USD", "RUB", "0")
    assert result.exit_code == 1
    assert "Invalid rate" in result.output


def test_rate_list_empty(invoke):
    """Test listing rates when none exist."""
    result = invoke("rate", "list")
    assert "No exchange rates recorded." in result.output


def test_convert_records_rate(invoke, temp_db):
    """Test convert with --rate multiplies and stores the rate."""
    result = invoke("convert", "100", "USD", "RUB", "--rate", "92.5")
    assert result.exit_code == 0
    assert "100.00 $ = 9,250.00 ₽" in result.output
    assert reload(temp_db).resolve_rate("USD", "RUB") == Decimal("92.5")


def test_convert_without_rate(invoke, temp_db):
    """Test convert without --rate uses the known rate and stores nothing."""
    invoke("rate", "record", "USD", "RUB", "100")
    result = invoke("convert", "500", "RUB", "USD")
    assert result.exit_code == 0
    assert "= 5.00 $" in result.output
    assert len(reload(temp_db).rates.records) == 1


def test_categories(invoke):
    """Test listing categories."""
    result = invoke("categories")
    assert result.exit_code == 0
    assert "Groceries" in result.output
    assert "#9C27B0" in result.output


def test_export_import(invoke, temp_db, tmp_path):
    """Test exporting and importing the full state."""
    invoke("rate", "record", "USD", "RUB", "90")
    invoke("add", "--amount", "10", "--currency", "USD")
    before = reload(temp_db).state()

    export_path = tmp_path / "data.json"
    result = invoke("export", str(export_path))
    assert result.exit_code == 0
    assert "Exported 1 expense(s)" in result.output
    assert set(json.loads(export_path.read_text(encoding="utf-8"))) == {
        "expenses", "currencies", "primaryCurrency", "exchangeRates",
    }

    # Wipe the data, then import it back
    empty_path = tmp_path / "empty.json"
    empty_path.write_text("{}", encoding="utf-8")
    invoke("import", str(empty_path))
    assert reload(temp_db).expenses == ()

    result = invoke("import", str(export_path))
    assert result.exit_code == 0
    assert reload(temp_db).state() == before


def test_import_invalid(invoke, tmp_path):
    """Test importing a malformed file fails."""
    path = tmp_path / "bad.json"
    path.write_text("not json", encoding="utf-8")
    result = invoke("import", str(path))
    assert result.exit_code == 1
    assert "Invalid JSON" in result.output


def test_import_not_utf8(invoke, tmp_path):
    """Test importing a file that is not UTF-8 text fails cleanly."""
    path = tmp_path / "latin1.json"
    path.write_bytes('{"expenses": [], "note": "Café"}'.encode("latin-1"))
    result = invoke("import", str(path))
    assert result.exit_code == 1
    assert "not a UTF-8 text file" in result.output


def test_add_expense_decimal_comma(invoke, temp_db):
    """Test a comma before the last two digits is read as a decimal point."""
    result = invoke("add", "--amount", "12,50")
    assert result.exit_code == 0
    assert reload(temp_db).expenses[0].amount == Decimal("12.50")
