"""Tests for the JSON snapshot layout."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from spendtrack.domain import snapshot
from spendtrack.domain.categories import DEFAULT_CURRENCIES
from spendtrack.domain.entities import Category
from spendtrack.domain.errors import ValidationError


@pytest.fixture
def populated(tracker, noon):
    """Tracker with a rate history, an extra currency and two expenses."""
    for value in ("90", "92", "94"):
        tracker.record_rate("USD", "RUB", value, at=noon(2024, 5, 1))
    tracker.add_currency("gbp", "£", "Pound Sterling")
    tracker.add_expense("100", description="Market", category="Groceries", at=noon(2024, 5, 1))
    tracker.add_expense("3", currency="USD", category="Transport", at=noon(2024, 5, 2))
    return tracker


class TestStateToDict:
    """Tests for serializing state."""

    def test_top_level_fields(self, populated):
        """Test the four top-level fields are present."""
        data = snapshot.state_to_dict(populated.state())
        assert set(data) == {"expenses", "currencies", "primaryCurrency", "exchangeRates"}
        assert data["primaryCurrency"] == {"code": "RUB", "symbol": "₽", "name": "Russian Ruble"}

    def test_rate_layout(self, populated):
        """Test rates are keyed FROM_TO with current rate and history."""
        rates = snapshot.state_to_dict(populated.state())["exchangeRates"]
        assert list(rates) == ["USD_RUB"]
        assert Decimal(rates["USD_RUB"]["rate"]) == Decimal("92")
        assert [item["rate"] for item in rates["USD_RUB"]["history"]] == ["90", "92", "94"]

    def test_expense_layout(self, populated):
        """Test expenses embed currency and category by value."""
        expense = snapshot.state_to_dict(populated.state())["expenses"][1]
        assert expense["currency"]["code"] == "USD"
        assert expense["category"] == {"id": 2, "name": "Transport", "color": "#2196F3"}
        assert expense["primaryAmount"] == str(Decimal("3") / Decimal("92"))


class TestRoundTrip:
    """Tests for serialize then reload."""

    def test_json_round_trip(self, populated):
        """Test state survives dumps/loads unchanged."""
        state = populated.state()
        assert snapshot.loads(snapshot.dumps(state)) == state

    def test_round_trip_with_naive_date(self, tracker):
        """Test an expense added with a naive timestamp reloads unchanged."""
        tracker.add_expense("100", at=datetime(2024, 5, 1, 12))
        tracker.record_rate("USD", "RUB", "90", at=datetime(2024, 5, 1, 9))
        state = tracker.state()

        assert snapshot.loads(snapshot.dumps(state)) == state
        assert len(tracker.grouped_expenses()) == 1

    def test_dumps_is_json(self, populated):
        """Test the output is plain JSON with non-ASCII symbols intact."""
        text = snapshot.dumps(populated.state())
        assert "₽" in text
        assert isinstance(json.loads(text), dict)


class TestLoadDefaults:
    """Tests for load-time defaulting."""

    def test_empty_object(self):
        """Test an empty object yields defaults."""
        state = snapshot.loads("{}")
        assert state.currencies == DEFAULT_CURRENCIES
        assert state.primary_currency == DEFAULT_CURRENCIES[0]
        assert state.expenses == ()
        assert state.exchange_rates == ()

    def test_numbers_and_z_timestamps(self):
        """Test plain JSON numbers and trailing-Z dates are accepted."""
        data = {
            "expenses": [
                {
                    "id": "1714557600000",
                    "amount": 12.5,
                    "description": "",
                    "category": {"id": 3, "name": "Entertainment", "color": "#E91E63"},
                    "date": "2024-05-01T10:00:00.000Z",
                    "currency": {"code": "USD", "symbol": "$", "name": "US Dollar"},
                    "primaryAmount": 12.5,
                }
            ],
            "exchangeRates": {
                "USD_RUB": {"rate": 91, "history": [{"rate": 91, "date": "2024-05-01T09:00:00.000Z"}]}
            },
        }
        state = snapshot.state_from_dict(data)

        expense = state.expenses[0]
        assert expense.amount == Decimal("12.5")
        assert expense.description is None
        assert expense.date == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert state.exchange_rates[0].current_rate == Decimal("91")

    def test_rate_without_history(self):
        """Test a record with only a rate gets one observation."""
        state = snapshot.state_from_dict({"exchangeRates": {"EUR_USD": {"rate": "1.1"}}})
        record = state.exchange_rates[0]
        assert record.key == ("EUR", "USD")
        assert len(record.history) == 1
        assert record.current_rate == Decimal("1.1")

    def test_unknown_category_kept(self):
        """Test a category outside the fixed set keeps its stored fields."""
        category = snapshot.category_from_dict({"id": 42, "name": "Pets", "color": "#000"})
        assert category == Category(id=42, name="Pets", color="#000")

    def test_unregistered_primary_replaced(self):
        """Test a primary currency missing from the list falls back to the first."""
        data = {
            "currencies": [{"code": "USD", "symbol": "$", "name": "US Dollar"}],
            "primaryCurrency": {"code": "RUB", "symbol": "₽", "name": "Russian Ruble"},
        }
        assert snapshot.state_from_dict(data).primary_currency.code == "USD"

    def test_primary_matched_by_code(self):
        """Test a saved primary with a different name resolves to the registered currency."""
        state = snapshot.loads(
            '{"primaryCurrency": {"code": "USD", "symbol": "$", "name": "Доллар США"}}'
        )
        assert state.primary_currency == DEFAULT_CURRENCIES[1]

    def test_primary_matched_by_code_in_saved_list(self):
        """Test code matching picks the first registered currency with that code."""
        data = {
            "currencies": [
                {"code": "RUB", "symbol": "₽", "name": "Рубль"},
                {"code": "EUR", "symbol": "€", "name": "Евро"},
            ],
            "primaryCurrency": {"code": "eur", "symbol": "EUR", "name": "Euro"},
        }
        primary = snapshot.state_from_dict(data).primary_currency
        assert (primary.code, primary.name) == ("EUR", "Евро")

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '{"expenses": [{"id": "1"}]}',
            '{"exchangeRates": {"USDRUB": {"rate": 1}}}',
            '{"exchangeRates": {"USD_RUB": {"rate": "abc"}}}',
        ],
    )
    def test_malformed_data(self, text):
        """Test malformed input raises ValidationError."""
        with pytest.raises(ValidationError):
            snapshot.loads(text)
