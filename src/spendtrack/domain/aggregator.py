"""Live totals and conversions in the primary currency."""

from decimal import Decimal

from spendtrack.domain.currency import CurrencyRegistry
from spendtrack.domain.entities import Expense
from spendtrack.domain.ledger import ExpenseLedger
from spendtrack.domain.rates import RateResolver


class Aggregator:
    """Computes primary-currency values from current rates.

    Nothing here is cached. The results follow the latest rates and primary
    currency, unlike ``Expense.primary_amount`` which is fixed when the
    expense is recorded.
    """

    def __init__(self, registry: CurrencyRegistry, ledger: ExpenseLedger, resolver: RateResolver):
        self.registry = registry
        self.ledger = ledger
        self.resolver = resolver

    def display_conversion(self, expense: Expense) -> Decimal:
        """Convert one expense into the primary currency at current rates."""
        primary = self.registry.primary_currency
        if expense.currency.code == primary.code:
            return expense.amount
        return self.resolver.to_target(expense.amount, expense.currency.code, primary.code)

    def total_in_primary(self) -> Decimal:
        """Sum of all expenses in the primary currency at current rates."""
        return sum(
            (self.display_conversion(expense) for expense in self.ledger.expenses),
            Decimal(0),
        )

    def totals_by_category(self) -> dict[str, Decimal]:
        """Live primary-currency totals per category name, largest first."""
        totals: dict[str, Decimal] = {}
        for expense in self.ledger.expenses:
            name = expense.category.name
            totals[name] = totals.get(name, Decimal(0)) + self.display_conversion(expense)
        return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))
