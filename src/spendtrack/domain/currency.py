"""Currency registry."""

import logging
from typing import Iterable, Optional

from spendtrack.domain.categories import DEFAULT_CURRENCIES
from spendtrack.domain.entities import Currency
from spendtrack.domain.errors import (
    ValidationError,
    duplicate_currency_code,
    empty_currency_field,
    primary_not_registered,
)

logger = logging.getLogger(__name__)


def match_registered(
    currency: Currency, currencies: Iterable[Currency]
) -> Optional[Currency]:
    """Find ``currency`` among ``currencies``.

    An exact match wins; otherwise the first currency with the same code is
    returned, so data saved with different symbols or names still resolves.
    """
    currencies = list(currencies)
    if currency in currencies:
        return currency
    code = currency.code.upper()
    return next((item for item in currencies if item.code == code), None)


class CurrencyRegistry:
    """Ordered set of known currencies plus the designated primary currency.

    The registry is never empty and the primary currency is always one of its
    members. Duplicate codes are accepted unless ``unique_codes`` is set.
    """

    def __init__(
        self,
        currencies: Optional[Iterable[Currency]] = None,
        primary_currency: Optional[Currency] = None,
        unique_codes: bool = False,
    ):
        """Initialize currency registry.

        Args:
            currencies: Initial currencies in display order; defaults are used
                when missing or empty
            primary_currency: Primary currency; falls back to the first
                currency when missing or not registered
            unique_codes: If True, reject currencies whose code is taken
        """
        self.unique_codes = unique_codes
        self._currencies: list[Currency] = list(currencies or ())
        if not self._currencies:
            self._currencies = list(DEFAULT_CURRENCIES)

        primary = None
        if primary_currency is not None:
            primary = match_registered(primary_currency, self._currencies)
            if primary is None:
                logger.warning(
                    "Primary currency %s is not registered, using %s",
                    primary_currency.code,
                    self._currencies[0].code,
                )
        self._primary = primary or self._currencies[0]

    @property
    def currencies(self) -> tuple[Currency, ...]:
        """Registered currencies in display order."""
        return tuple(self._currencies)

    @property
    def primary_currency(self) -> Currency:
        return self._primary

    def get(self, code: str) -> Optional[Currency]:
        """Get the first currency registered with a code.

        Args:
            code: Currency code (case-insensitive)

        Returns:
            Currency or None if not found
        """
        code = code.strip().upper()
        for currency in self._currencies:
            if currency.code == code:
                return currency
        return None

    def __contains__(self, currency: object) -> bool:
        return currency in self._currencies

    def add_currency(self, code: str, symbol: str, name: str) -> Currency:
        """Register a new currency.

        Args:
            code: Currency code, stored upper-case
            symbol: Display symbol
            name: Display name

        Returns:
            The new currency

        Raises:
            ValidationError: If a field is empty, or the code is taken and
                unique codes are enforced
        """
        for field_name, value in (("code", code), ("symbol", symbol), ("name", name)):
            if value is None or not value.strip():
                raise ValidationError(empty_currency_field(field_name))

        currency = Currency(code=code.strip().upper(), symbol=symbol.strip(), name=name.strip())
        if self.unique_codes and self.get(currency.code) is not None:
            raise ValidationError(duplicate_currency_code(currency.code))

        self._currencies.append(currency)
        logger.info("Added currency %s (%s)", currency.code, currency.name)
        return currency

    def set_primary_currency(self, currency: Currency) -> None:
        """Replace the primary currency.

        Existing expense snapshots are left untouched.

        Raises:
            ValidationError: If the currency is not registered
        """
        if currency not in self._currencies:
            raise ValidationError(primary_not_registered(currency.code))
        self._primary = currency
        logger.info("Primary currency set to %s", currency.code)
