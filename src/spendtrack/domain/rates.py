"""Exchange rate store and resolver.

Rates are entered by hand. A record keyed ``(FROM, TO)`` means
``1 FROM = rate TO``; only the orientation the user entered is stored and
the reverse is computed on read.
"""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Iterable, Optional

from spendtrack.domain.entities import RateObservation, RateRecord
from spendtrack.domain.errors import ValidationError
from spendtrack.utils.amount_parser import parse_rate
from spendtrack.utils.date_parser import ensure_aware

logger = logging.getLogger(__name__)

PARITY = Decimal(1)


def _normalize(code: str) -> str:
    return code.strip().upper()


class RateStore:
    """Mapping from ordered currency-code pairs to rate records."""

    def __init__(self, records: Optional[Iterable[RateRecord]] = None):
        """Initialize rate store.

        Args:
            records: Previously stored rate records
        """
        self._records: dict[tuple[str, str], RateRecord] = {}
        for record in records or ():
            self._records[record.key] = record

    @property
    def records(self) -> tuple[RateRecord, ...]:
        """All stored records in insertion order."""
        return tuple(self._records.values())

    def get(self, from_code: str, to_code: str) -> Optional[RateRecord]:
        """Get the record stored exactly under ``(from_code, to_code)``."""
        return self._records.get((_normalize(from_code), _normalize(to_code)))

    def record_rate(
        self,
        from_code: str,
        to_code: str,
        rate: str | int | float | Decimal,
        at: Optional[datetime] = None,
    ) -> RateRecord:
        """Record an observed rate for a currency pair.

        Appends to the existing ``(from_code, to_code)`` record, or creates
        one. The reverse pair is never touched.

        Args:
            from_code: Source currency code
            to_code: Target currency code
            rate: Units of ``to_code`` per unit of ``from_code``
            at: Observation time (defaults to now)

        Returns:
            The updated record

        Raises:
            ValidationError: If a code is empty or the rate is not a finite
                positive number
        """
        from_code = _normalize(from_code)
        to_code = _normalize(to_code)
        if not from_code or not to_code:
            raise ValidationError("Currency codes must not be empty")
        try:
            value = parse_rate(rate)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        observed_at = ensure_aware(at) if at is not None else datetime.now(UTC)
        observation = RateObservation(rate=value, observed_at=observed_at)
        key = (from_code, to_code)
        existing = self._records.get(key)
        if existing is None:
            record = RateRecord(from_code=from_code, to_code=to_code, history=(observation,))
        else:
            record = existing.with_observation(observation)
        self._records[key] = record

        logger.info(
            "Recorded rate 1 %s = %s %s (current %s over %d observations)",
            from_code,
            value,
            to_code,
            record.current_rate,
            len(record.history),
        )
        return record


class RateResolver:
    """Resolves the best known rate between two currencies."""

    def __init__(self, store: RateStore):
        self.store = store

    def resolve_rate(self, from_code: str, to_code: str) -> Decimal:
        """Return how many ``to_code`` units one ``from_code`` unit is worth.

        Falls back to parity (1) when neither orientation is stored. Callers
        cannot tell a fallback from a real 1:1 rate; use ``has_rate`` for that.
        """
        from_code = _normalize(from_code)
        to_code = _normalize(to_code)
        if from_code == to_code:
            return PARITY

        direct = self.store.get(from_code, to_code)
        if direct is not None:
            return direct.current_rate

        inverse = self.store.get(to_code, from_code)
        if inverse is not None:
            return PARITY / inverse.current_rate

        return PARITY

    def has_rate(self, from_code: str, to_code: str) -> bool:
        """Check whether resolve_rate is backed by a stored record."""
        if _normalize(from_code) == _normalize(to_code):
            return True
        return (
            self.store.get(from_code, to_code) is not None
            or self.store.get(to_code, from_code) is not None
        )

    def to_target(self, amount: Decimal, source_code: str, target_code: str) -> Decimal:
        """Convert an amount recorded in source_code into target_code.

        Uses the ledger's convention ``amount / resolve_rate(source, target)``.
        """
        return amount / self.resolve_rate(source_code, target_code)
