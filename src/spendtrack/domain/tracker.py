"""Expense tracker state container."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

from spendtrack.domain.aggregator import Aggregator
from spendtrack.domain.categories import CATEGORIES, require_category
from spendtrack.domain.currency import CurrencyRegistry
from spendtrack.domain.entities import (
    Category,
    Currency,
    DayGroup,
    Expense,
    RateRecord,
    TrackerState,
)
from spendtrack.domain.errors import (
    DomainError,
    PersistenceError,
    ValidationError,
    currency_not_found,
)
from spendtrack.domain.ledger import ExpenseLedger
from spendtrack.domain.rates import RateResolver, RateStore
from spendtrack.utils.amount_parser import parse_amount, parse_rate

if TYPE_CHECKING:
    from spendtrack.database.base import Database

logger = logging.getLogger(__name__)

Listener = Callable[["ExpenseTracker"], None]
Number = str | int | float | Decimal


class ExpenseTracker:
    """Owns the currency registry, rate store and expense ledger.

    Mutations that fail validation change nothing and return None (or
    False). Successful mutations notify subscribers and then save the whole
    state through the database, if one is attached. A failed save is logged
    and the in-memory change is kept.
    """

    def __init__(
        self,
        state: Optional[TrackerState] = None,
        db: Optional[Database] = None,
        unique_codes: bool = False,
    ):
        """Initialize expense tracker.

        Args:
            state: Initial state (defaults to the default currencies and no
                expenses or rates)
            db: Database used to save state after every mutation
            unique_codes: If True, reject currencies whose code is taken
        """
        self.db = db
        self.unique_codes = unique_codes
        self._listeners: list[Listener] = []
        self._build(state)

    @classmethod
    def load(cls, db: Database, unique_codes: bool = False) -> ExpenseTracker:
        """Create a tracker from the state saved in a database.

        A database without saved state, or one that cannot be read, yields a
        tracker with default state.
        """
        state = None
        try:
            state = db.load_state()
        except PersistenceError:
            logger.exception("Could not load saved state, starting empty")
        return cls(state=state, db=db, unique_codes=unique_codes)

    def _build(self, state: Optional[TrackerState]) -> None:
        if state is None:
            self.registry = CurrencyRegistry(unique_codes=self.unique_codes)
            self.rates = RateStore()
            self.ledger = ExpenseLedger()
        else:
            self.registry = CurrencyRegistry(
                state.currencies, state.primary_currency, unique_codes=self.unique_codes
            )
            self.rates = RateStore(state.exchange_rates)
            self.ledger = ExpenseLedger(state.expenses)
        self.resolver = RateResolver(self.rates)
        self.aggregator = Aggregator(self.registry, self.ledger, self.resolver)

    # Observation
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(tracker)`` after every successful mutation.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)
        self.save()

    def save(self) -> bool:
        """Save the whole state. Failures are logged, not raised.

        Returns:
            True if the state was saved
        """
        if self.db is None:
            return False
        try:
            self.db.save_state(self.state())
        except PersistenceError:
            logger.exception("Could not save tracker state")
            return False
        return True

    # Snapshot
    def state(self) -> TrackerState:
        """Return the current state as an immutable snapshot."""
        return TrackerState(
            currencies=self.registry.currencies,
            primary_currency=self.registry.primary_currency,
            expenses=self.ledger.expenses,
            exchange_rates=self.rates.records,
        )

    def apply_state(self, state: TrackerState) -> None:
        """Replace the whole state, e.g. after an import."""
        self._build(state)
        logger.info(
            "Applied state with %d expenses, %d currencies and %d rates",
            len(state.expenses),
            len(state.currencies),
            len(state.exchange_rates),
        )
        self._changed()

    # Currencies
    @property
    def currencies(self) -> tuple[Currency, ...]:
        return self.registry.currencies

    @property
    def primary_currency(self) -> Currency:
        return self.registry.primary_currency

    @property
    def categories(self) -> tuple[Category, ...]:
        return CATEGORIES

    def get_currency(self, code: str) -> Optional[Currency]:
        """Get a registered currency by code, or None."""
        return self.registry.get(code)

    def add_currency(self, code: str, symbol: str, name: str) -> Optional[Currency]:
        """Register a currency.

        Returns:
            The new currency, or None if a field is empty (or the code is
            taken when unique codes are enforced)
        """
        try:
            currency = self.registry.add_currency(code, symbol, name)
        except ValidationError as e:
            logger.warning("Currency not added: %s", e)
            return None
        self._changed()
        return currency

    def set_primary_currency(self, currency: Currency | str) -> Optional[Currency]:
        """Change the primary currency.

        Args:
            currency: Registered currency or its code

        Returns:
            The new primary currency, or None if it is not registered
        """
        if isinstance(currency, str):
            found = self.registry.get(currency)
            if found is None:
                logger.warning("Primary currency not changed: %s", currency_not_found(currency))
                return None
            currency = found
        try:
            self.registry.set_primary_currency(currency)
        except ValidationError as e:
            logger.warning("Primary currency not changed: %s", e)
            return None
        self._changed()
        return currency

    # Rates
    def record_rate(
        self, from_code: str, to_code: str, rate: Number, at: Optional[datetime] = None
    ) -> Optional[RateRecord]:
        """Record an observed exchange rate (``1 from = rate to``).

        Returns:
            The updated rate record, or None if the rate is invalid
        """
        try:
            record = self.rates.record_rate(from_code, to_code, rate, at=at)
        except ValidationError as e:
            logger.warning("Rate not recorded: %s", e)
            return None
        self._changed()
        return record

    def resolve_rate(self, from_code: str, to_code: str) -> Decimal:
        """Best known rate from one currency to another (parity if unknown)."""
        return self.resolver.resolve_rate(from_code, to_code)

    def has_rate(self, from_code: str, to_code: str) -> bool:
        """Check whether a rate between two currencies is actually known."""
        return self.resolver.has_rate(from_code, to_code)

    def convert(
        self, amount: Number, from_code: str, to_code: str, rate: Optional[Number] = None
    ) -> Optional[Decimal]:
        """Convert an amount between currencies.

        With an explicit rate the rate is recorded for ``(from, to)`` and the
        result is ``amount * rate``. Without one the best known rate is used
        and nothing is recorded.

        Returns:
            Converted amount, or None if the amount or rate is invalid
        """
        try:
            value = parse_amount(amount)
            if rate is not None:
                rate = parse_rate(rate)
        except ValueError as e:
            logger.warning("Conversion rejected: %s", e)
            return None

        if rate is None:
            return value * self.resolve_rate(from_code, to_code)

        if self.record_rate(from_code, to_code, rate) is None:
            return None
        return value * rate

    # Expenses
    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self.ledger.expenses

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self.ledger.get(expense_id)

    def add_expense(
        self,
        amount: Number,
        description: Optional[str] = None,
        category: Optional[Category | str | int] = None,
        currency: Optional[Currency | str] = None,
        at: Optional[datetime] = None,
    ) -> Optional[Expense]:
        """Record an expense.

        The primary-currency amount is computed now and stored with the
        expense; later rate or primary currency changes do not touch it.

        Args:
            amount: Amount in the expense currency
            description: Optional description
            category: Category, category name or ID (defaults to the first)
            currency: Registered currency or code (defaults to primary)
            at: Expense timestamp (defaults to now)

        Returns:
            The new expense, or None if validation failed
        """
        try:
            resolved_currency = self._require_currency(currency)
            if category is not None and not isinstance(category, Category):
                category = require_category(category)
        except DomainError as e:
            logger.warning("Expense not added: %s", e)
            return None

        primary = self.registry.primary_currency

        def snapshot(value: Decimal) -> Decimal:
            if resolved_currency.code == primary.code:
                return value
            return self.resolver.to_target(value, resolved_currency.code, primary.code)

        try:
            expense = self.ledger.add_expense(
                amount,
                currency=resolved_currency,
                primary_amount=snapshot,
                description=description,
                category=category,
                at=at,
            )
        except ValidationError as e:
            logger.warning("Expense not added: %s", e)
            return None
        self._changed()
        return expense

    def _require_currency(self, currency: Optional[Currency | str]) -> Currency:
        if currency is None:
            return self.registry.primary_currency
        if isinstance(currency, str):
            found = self.registry.get(currency)
            if found is None:
                raise ValidationError(currency_not_found(currency))
            return found
        if currency not in self.registry:
            raise ValidationError(currency_not_found(currency.code))
        return currency

    def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense. Unknown IDs are ignored.

        Returns:
            True if an expense was removed
        """
        removed = self.ledger.delete_expense(expense_id)
        if removed:
            self._changed()
        return removed

    def grouped_expenses(self) -> list[DayGroup]:
        """Expenses grouped by calendar day, newest day first."""
        return self.ledger.grouped_by_day()

    # Aggregates
    def total_in_primary(self) -> Decimal:
        """Live total of all expenses in the primary currency."""
        return self.aggregator.total_in_primary()

    def display_conversion(self, expense: Expense) -> Decimal:
        """Live value of an expense in the primary currency."""
        return self.aggregator.display_conversion(expense)

    def totals_by_category(self) -> dict[str, Decimal]:
        """Live primary-currency totals per category."""
        return self.aggregator.totals_by_category()
