"""Domain layer for spendtrack application."""

from spendtrack.domain.currency import CurrencyRegistry
from spendtrack.domain.rates import RateStore, RateResolver
from spendtrack.domain.ledger import ExpenseLedger
from spendtrack.domain.aggregator import Aggregator
from spendtrack.domain.tracker import ExpenseTracker

__all__ = [
    "CurrencyRegistry",
    "RateStore",
    "RateResolver",
    "ExpenseLedger",
    "Aggregator",
    "ExpenseTracker",
]
