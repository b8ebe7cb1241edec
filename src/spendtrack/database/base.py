"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from spendtrack.domain.entities import TrackerState


class Database(ABC):
    """Abstract persistence gateway for spendtrack.

    The tracker state is always written and read as one unit.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def load_state(self) -> Optional[TrackerState]:
        """Load the saved tracker state.

        Returns:
            Saved state, or None if nothing has been saved yet

        Raises:
            PersistenceError: If the database cannot be read
        """
        pass

    @abstractmethod
    def save_state(self, state: TrackerState) -> None:
        """Replace the saved tracker state.

        Raises:
            PersistenceError: If the state could not be written; nothing is
                partially written
        """
        pass
