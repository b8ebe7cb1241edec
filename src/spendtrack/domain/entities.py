"""Domain model entities for spendtrack.

These are pure data classes representing business concepts, independent of
database schema and of the JSON layout used for export.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

# Number of most recent observations averaged into a rate record's current rate
RATE_WINDOW = 10


@dataclass(frozen=True)
class Currency:
    """Currency domain entity. Identity is the code."""

    code: str
    symbol: str
    name: str


@dataclass(frozen=True)
class Category:
    """Expense category domain entity."""

    id: int
    name: str
    color: str


@dataclass(frozen=True)
class RateObservation:
    """A single manually entered exchange rate."""

    rate: Decimal
    observed_at: datetime


@dataclass(frozen=True)
class RateRecord:
    """Exchange rate for an ordered currency pair.

    ``1 from_code = current_rate to_code``. The current rate is derived from
    the history and cannot be set directly.
    """

    from_code: str
    to_code: str
    history: tuple[RateObservation, ...]

    @property
    def key(self) -> tuple[str, str]:
        return (self.from_code, self.to_code)

    @property
    def current_rate(self) -> Decimal:
        """Mean of the last RATE_WINDOW observed rates."""
        recent = self.history[-RATE_WINDOW:]
        return sum((obs.rate for obs in recent), Decimal(0)) / len(recent)

    def with_observation(self, observation: RateObservation) -> "RateRecord":
        """Return a copy with one more observation appended."""
        return RateRecord(
            from_code=self.from_code,
            to_code=self.to_code,
            history=self.history + (observation,),
        )


@dataclass(frozen=True)
class Expense:
    """Expense domain entity.

    ``primary_amount`` is the value in the primary currency at the time the
    expense was recorded. It is never recomputed.
    """

    id: str
    amount: Decimal
    description: Optional[str]
    category: Category
    date: datetime
    currency: Currency
    primary_amount: Decimal


@dataclass(frozen=True)
class DayGroup:
    """Expenses recorded on one calendar day."""

    label: str
    day: date
    expenses: tuple[Expense, ...]


@dataclass(frozen=True)
class TrackerState:
    """Complete tracker state, saved and loaded as one unit."""

    currencies: tuple[Currency, ...]
    primary_currency: Currency
    expenses: tuple[Expense, ...] = ()
    exchange_rates: tuple[RateRecord, ...] = field(default_factory=tuple)
