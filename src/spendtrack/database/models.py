"""SQLAlchemy models for spendtrack database."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

from spendtrack.utils.date_parser import ensure_aware

Base = declarative_base()


class DecimalText(TypeDecorator):
    """Decimal stored as text so values round-trip exactly."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class IsoDateTime(TypeDecorator):
    """Timezone-aware datetime stored as ISO-8601 text."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[str]:
        if value is None:
            return None
        return ensure_aware(value).isoformat()

    def process_result_value(self, value: Optional[str], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return datetime.fromisoformat(value)


class Currency(Base):
    """Registered currency model. Codes are not unique."""

    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False)
    code = Column(String, nullable=False)
    symbol = Column(String, nullable=False)
    name = Column(String, nullable=False)


class Preferences(Base):
    """Single-row table holding the primary currency."""

    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True)
    primary_code = Column(String, nullable=False)
    primary_symbol = Column(String, nullable=False)
    primary_name = Column(String, nullable=False)


class ExchangeRate(Base):
    """Exchange rate record for an ordered currency pair."""

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    position = Column(Integer, nullable=False)
    from_code = Column(String, nullable=False)
    to_code = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("from_code", "to_code", name="uq_rate_pair"),)

    # Relationships
    observations = relationship(
        "RateObservation",
        back_populates="exchange_rate",
        cascade="all, delete-orphan",
        order_by="RateObservation.position",
    )


class RateObservation(Base):
    """Single observed rate within a record's history."""

    __tablename__ = "rate_observations"

    id = Column(Integer, primary_key=True)
    exchange_rate_id = Column(Integer, ForeignKey("exchange_rates.id"), nullable=False)
    position = Column(Integer, nullable=False)
    rate = Column(DecimalText, nullable=False)
    observed_at = Column(IsoDateTime, nullable=False)

    # Relationships
    exchange_rate = relationship("ExchangeRate", back_populates="observations")


class Expense(Base):
    """Expense model. Currency and category are stored by value."""

    __tablename__ = "expenses"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False)
    amount = Column(DecimalText, nullable=False)
    description = Column(String, nullable=True)
    category_id = Column(Integer, nullable=False)
    category_name = Column(String, nullable=False)
    category_color = Column(String, nullable=False)
    date = Column(IsoDateTime, nullable=False)
    currency_code = Column(String, nullable=False)
    currency_symbol = Column(String, nullable=False)
    currency_name = Column(String, nullable=False)
    primary_amount = Column(DecimalText, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
