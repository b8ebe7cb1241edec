"""Fixed expense categories and default currencies."""

from typing import Optional

from spendtrack.domain.entities import Category, Currency
from spendtrack.domain.errors import NotFoundError, category_not_found


# Categories are not user-editable and are not persisted
CATEGORIES = (
    Category(id=1, name="Groceries", color="#FF9800"),
    Category(id=2, name="Transport", color="#2196F3"),
    Category(id=3, name="Entertainment", color="#E91E63"),
    Category(id=4, name="Bills", color="#4CAF50"),
    Category(id=5, name="Other", color="#9C27B0"),
)

DEFAULT_CATEGORY = CATEGORIES[0]

# Seed currencies; the first one is the default primary currency
DEFAULT_CURRENCIES = (
    Currency(code="RUB", symbol="₽", name="Russian Ruble"),
    Currency(code="USD", symbol="$", name="US Dollar"),
    Currency(code="EUR", symbol="€", name="Euro"),
)


def find_category(value: str | int) -> Optional[Category]:
    """Find a category by ID or case-insensitive name.

    Args:
        value: Category ID, numeric string, or name

    Returns:
        Category or None if not found
    """
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        category_id = int(value)
        for category in CATEGORIES:
            if category.id == category_id:
                return category
        return None

    name = value.strip().lower()
    for category in CATEGORIES:
        if category.name.lower() == name:
            return category
    return None


def require_category(value: str | int) -> Category:
    """Find a category or raise NotFoundError."""
    category = find_category(value)
    if category is None:
        raise NotFoundError(category_not_found(value))
    return category
