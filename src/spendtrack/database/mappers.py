"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the table layout can change
without touching the domain.
"""

from spendtrack.domain import entities as domain
from spendtrack.domain.categories import find_category
from spendtrack.database.models import (
    Currency as ORMCurrency,
    Preferences as ORMPreferences,
    ExchangeRate as ORMExchangeRate,
    RateObservation as ORMRateObservation,
    Expense as ORMExpense,
)


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy Currency model to domain Currency entity."""
    return domain.Currency(
        code=orm_currency.code,
        symbol=orm_currency.symbol,
        name=orm_currency.name,
    )


def currency_to_orm(currency: domain.Currency, position: int) -> ORMCurrency:
    """Convert domain Currency entity to a new SQLAlchemy Currency row."""
    return ORMCurrency(
        position=position,
        code=currency.code,
        symbol=currency.symbol,
        name=currency.name,
    )


def primary_currency_to_domain(orm_preferences: ORMPreferences) -> domain.Currency:
    """Extract the primary currency from the preferences row."""
    return domain.Currency(
        code=orm_preferences.primary_code,
        symbol=orm_preferences.primary_symbol,
        name=orm_preferences.primary_name,
    )


def preferences_to_orm(primary: domain.Currency) -> ORMPreferences:
    """Build the preferences row for a primary currency."""
    return ORMPreferences(
        id=1,
        primary_code=primary.code,
        primary_symbol=primary.symbol,
        primary_name=primary.name,
    )


def rate_record_to_domain(orm_rate: ORMExchangeRate) -> domain.RateRecord:
    """Convert SQLAlchemy ExchangeRate model and its observations to a RateRecord."""
    return domain.RateRecord(
        from_code=orm_rate.from_code,
        to_code=orm_rate.to_code,
        history=tuple(
            domain.RateObservation(rate=obs.rate, observed_at=obs.observed_at)
            for obs in orm_rate.observations
        ),
    )


def rate_record_to_orm(record: domain.RateRecord, position: int) -> ORMExchangeRate:
    """Convert domain RateRecord to a new SQLAlchemy ExchangeRate with observations."""
    return ORMExchangeRate(
        position=position,
        from_code=record.from_code,
        to_code=record.to_code,
        observations=[
            ORMRateObservation(position=index, rate=obs.rate, observed_at=obs.observed_at)
            for index, obs in enumerate(record.history)
        ],
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    category = find_category(orm_expense.category_id)
    if category is None:
        category = domain.Category(
            id=orm_expense.category_id,
            name=orm_expense.category_name,
            color=orm_expense.category_color,
        )
    return domain.Expense(
        id=orm_expense.id,
        amount=orm_expense.amount,
        description=orm_expense.description,
        category=category,
        date=orm_expense.date,
        currency=domain.Currency(
            code=orm_expense.currency_code,
            symbol=orm_expense.currency_symbol,
            name=orm_expense.currency_name,
        ),
        primary_amount=orm_expense.primary_amount,
    )


def expense_to_orm(expense: domain.Expense, position: int) -> ORMExpense:
    """Convert domain Expense entity to a new SQLAlchemy Expense row."""
    return ORMExpense(
        id=expense.id,
        position=position,
        amount=expense.amount,
        description=expense.description,
        category_id=expense.category.id,
        category_name=expense.category.name,
        category_color=expense.category.color,
        date=expense.date,
        currency_code=expense.currency.code,
        currency_symbol=expense.currency.symbol,
        currency_name=expense.currency.name,
        primary_amount=expense.primary_amount,
    )
