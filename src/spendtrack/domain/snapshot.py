"""Conversion between tracker state and the persisted JSON layout.

The layout is a single object with four top-level fields::

    {
      "expenses": [{"id", "amount", "description", "category", "date",
                    "currency", "primaryAmount"}, ...],
      "currencies": [{"code", "symbol", "name"}, ...],
      "primaryCurrency": {"code", "symbol", "name"},
      "exchangeRates": {"FROM_TO": {"rate", "history": [{"rate", "date"}]}}
    }

Numbers are written as decimal strings so that reading back is exact.
Plain JSON numbers are accepted as well.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from spendtrack.domain.categories import DEFAULT_CURRENCIES, find_category
from spendtrack.domain.currency import match_registered
from spendtrack.domain.entities import (
    Category,
    Currency,
    Expense,
    RateObservation,
    RateRecord,
    TrackerState,
)
from spendtrack.domain.errors import ValidationError
from spendtrack.utils.amount_parser import parse_amount
from spendtrack.utils.date_parser import ensure_aware

logger = logging.getLogger(__name__)


def _number(value: Any) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        raise ValidationError(f"Invalid number in saved data: {value!r}") from e


def _timestamp(value: str) -> datetime:
    # Older exports may end in "Z"
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # Naive values are read as local time, like new expenses
    return ensure_aware(datetime.fromisoformat(value))


def currency_to_dict(currency: Currency) -> dict[str, str]:
    return {"code": currency.code, "symbol": currency.symbol, "name": currency.name}


def currency_from_dict(data: dict[str, Any]) -> Currency:
    return Currency(code=str(data["code"]).upper(), symbol=data["symbol"], name=data["name"])


def category_from_dict(data: dict[str, Any]) -> Category:
    """Resolve a stored category against the fixed category set.

    Unknown IDs keep the stored name and color.
    """
    known = find_category(int(data["id"]))
    if known is not None:
        return known
    return Category(id=int(data["id"]), name=data.get("name", ""), color=data.get("color", ""))


def expense_to_dict(expense: Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "amount": str(expense.amount),
        "description": expense.description,
        "category": {
            "id": expense.category.id,
            "name": expense.category.name,
            "color": expense.category.color,
        },
        "date": expense.date.isoformat(),
        "currency": currency_to_dict(expense.currency),
        "primaryAmount": str(expense.primary_amount),
    }


def expense_from_dict(data: dict[str, Any]) -> Expense:
    amount = _number(data["amount"])
    return Expense(
        id=str(data["id"]),
        amount=amount,
        description=data.get("description") or None,
        category=category_from_dict(data["category"]),
        date=_timestamp(data["date"]),
        currency=currency_from_dict(data["currency"]),
        primary_amount=_number(data.get("primaryAmount", amount)),
    )


def rate_record_to_dict(record: RateRecord) -> dict[str, Any]:
    return {
        "rate": str(record.current_rate),
        "history": [
            {"rate": str(obs.rate), "date": obs.observed_at.isoformat()}
            for obs in record.history
        ],
    }


def rate_record_from_dict(key: str, data: dict[str, Any]) -> RateRecord:
    """Build a rate record from its ``FROM_TO`` key and stored fields.

    A record without history is loaded with its rate as the only
    observation, dated at the epoch.
    """
    from_code, separator, to_code = key.partition("_")
    if not separator or not from_code or not to_code:
        raise ValidationError(f"Invalid exchange rate key '{key}'")

    history = tuple(
        RateObservation(rate=_number(item["rate"]), observed_at=_timestamp(item["date"]))
        for item in data.get("history") or ()
    )
    if not history:
        history = (
            RateObservation(
                rate=_number(data["rate"]),
                observed_at=_timestamp("1970-01-01T00:00:00+00:00"),
            ),
        )
    return RateRecord(from_code=from_code.upper(), to_code=to_code.upper(), history=history)


def state_to_dict(state: TrackerState) -> dict[str, Any]:
    """Serialize tracker state into the persisted layout."""
    return {
        "expenses": [expense_to_dict(expense) for expense in state.expenses],
        "currencies": [currency_to_dict(currency) for currency in state.currencies],
        "primaryCurrency": currency_to_dict(state.primary_currency),
        "exchangeRates": {
            f"{record.from_code}_{record.to_code}": rate_record_to_dict(record)
            for record in state.exchange_rates
        },
    }


def state_from_dict(data: dict[str, Any]) -> TrackerState:
    """Load tracker state from the persisted layout.

    Missing fields fall back to an empty collection or the default
    currencies. The primary currency is matched by value, then by code;
    one with no registered code is replaced by the first currency.

    Raises:
        ValidationError: If present data is malformed
    """
    try:
        currencies = tuple(currency_from_dict(item) for item in data.get("currencies") or ())
        if not currencies:
            currencies = DEFAULT_CURRENCIES

        primary_data = data.get("primaryCurrency")
        primary = currencies[0]
        if primary_data:
            saved = currency_from_dict(primary_data)
            primary = match_registered(saved, currencies)
            if primary is None:
                logger.warning("Saved primary currency %s is not registered", saved.code)
                primary = currencies[0]

        expenses = tuple(expense_from_dict(item) for item in data.get("expenses") or ())
        rates = tuple(
            rate_record_from_dict(key, value)
            for key, value in (data.get("exchangeRates") or {}).items()
        )
    except ValidationError:
        raise
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ValidationError(f"Malformed tracker data: {e}") from e

    return TrackerState(
        currencies=currencies,
        primary_currency=primary,
        expenses=expenses,
        exchange_rates=rates,
    )


def dumps(state: TrackerState) -> str:
    """Serialize tracker state to a JSON string."""
    return json.dumps(state_to_dict(state), ensure_ascii=False, indent=2)


def loads(text: str) -> TrackerState:
    """Load tracker state from a JSON string.

    Raises:
        ValidationError: If the text is not valid tracker JSON
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Tracker data must be a JSON object")
    return state_from_dict(data)
