"""Expense ledger."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from spendtrack.domain.categories import DEFAULT_CATEGORY
from spendtrack.domain.entities import Category, Currency, DayGroup, Expense
from spendtrack.domain.errors import ValidationError
from spendtrack.utils.amount_parser import parse_positive
from spendtrack.utils.date_parser import ensure_aware, format_day

logger = logging.getLogger(__name__)


def new_expense_id() -> str:
    """Generate a unique expense ID."""
    return uuid.uuid4().hex


class ExpenseLedger:
    """Recorded expenses, kept in insertion order."""

    def __init__(
        self,
        expenses: Optional[Iterable[Expense]] = None,
        id_factory: Callable[[], str] = new_expense_id,
    ):
        """Initialize expense ledger.

        Args:
            expenses: Previously recorded expenses
            id_factory: Callable producing unique expense IDs
        """
        self._expenses: list[Expense] = list(expenses or ())
        self.id_factory = id_factory

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def get(self, expense_id: str) -> Optional[Expense]:
        """Get expense by ID, or None if not found."""
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def add_expense(
        self,
        amount: str | int | float | Decimal,
        currency: Currency,
        primary_amount: Callable[[Decimal], Decimal],
        description: Optional[str] = None,
        category: Optional[Category] = None,
        at: Optional[datetime] = None,
    ) -> Expense:
        """Record a new expense.

        Args:
            amount: Amount in ``currency``
            currency: Currency the expense was paid in
            primary_amount: Converts the parsed amount into the primary
                currency; evaluated once, the result is stored
            description: Optional description
            category: Category (defaults to the first category)
            at: Expense timestamp (defaults to now)

        Returns:
            The new expense

        Raises:
            ValidationError: If the amount is not a finite positive number
        """
        try:
            value = parse_positive(amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if description is not None:
            description = description.strip() or None

        expense = Expense(
            id=self.id_factory(),
            amount=value,
            description=description,
            category=category or DEFAULT_CATEGORY,
            date=ensure_aware(at) if at is not None else datetime.now().astimezone(),
            currency=currency,
            primary_amount=primary_amount(value),
        )
        self._expenses.append(expense)
        logger.info(
            "Added expense %s: %s %s (%s)",
            expense.id,
            expense.amount,
            currency.code,
            expense.category.name,
        )
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense.

        Args:
            expense_id: Expense ID

        Returns:
            True if an expense was removed, False if the ID is unknown
        """
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                del self._expenses[index]
                logger.info("Deleted expense %s", expense_id)
                return True
        logger.debug("Expense %s not found, nothing deleted", expense_id)
        return False

    def grouped_by_day(self) -> list[DayGroup]:
        """Group expenses by calendar day.

        Groups are ordered newest first by the date of their first expense;
        expenses keep ledger order inside a group.
        """
        groups: dict[str, list[Expense]] = {}
        for expense in self._expenses:
            groups.setdefault(format_day(expense.date), []).append(expense)

        result = [
            DayGroup(label=label, day=members[0].date.date(), expenses=tuple(members))
            for label, members in groups.items()
        ]
        result.sort(key=lambda group: group.expenses[0].date, reverse=True)
        return result
