"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class PersistenceError(DomainError):
    """Saving or loading tracker state failed."""


def currency_not_found(code: str) -> str:
    """Return message for an unknown currency code."""
    return f"Currency '{code}' not found"


def category_not_found(category: str | int) -> str:
    """Return message for an unknown category name or ID."""
    return f"Category '{category}' not found"


def empty_currency_field(field_name: str) -> str:
    """Return message when a currency field is blank."""
    return f"Currency {field_name} must not be empty"


def duplicate_currency_code(code: str) -> str:
    """Return message for a currency code that is already registered."""
    return f"Currency with code '{code}' already exists"


def primary_not_registered(code: str) -> str:
    """Return message when the primary currency is not in the registry."""
    return f"Cannot use '{code}' as primary currency: it is not registered"
