"""Mini README: Relational envelope storage built on SQLAlchemy.

Structure:
    * EnvelopeRow / ExpenseRow - declarative table mappings.
    * SqlEnvelopeRepository - repository translating rows to domain objects.

Any SQLAlchemy URL works; SQLite is the default. The schema is created on
start-up. Expenses are deleted with their envelope through the ORM cascade.
An in-memory SQLite URL is bound to a single shared connection so every
session sees the same database.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from ..envelopes.models import Envelope, Expense, TransactionType
from ..logging_utils import get_logger
from .base import EnvelopeRepository

LOGGER = get_logger(__name__)

Base = declarative_base()


class EnvelopeRow(Base):
    __tablename__ = "envelopes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    budget = Column(Integer, nullable=False)

    expenses = relationship(
        "ExpenseRow",
        cascade="all, delete-orphan",
        order_by="ExpenseRow.id",
        lazy="selectin",
    )


class ExpenseRow(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    envelope_id = Column(Integer, ForeignKey("envelopes.id", ondelete="CASCADE"), index=True)
    amount = Column(Integer, nullable=False)
    memo = Column(String, nullable=False, default="")
    transaction_type = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False)
    bank_expense_id = Column(Integer, nullable=True, index=True)


def build_engine(database_url: str) -> Engine:
    """Create an engine, sharing one connection for in-memory SQLite."""

    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_url, connect_args=connect_args)
    return create_engine(database_url)


def _expense_row(expense: Expense) -> ExpenseRow:
    return ExpenseRow(
        amount=expense.amount,
        memo=expense.memo,
        transaction_type=expense.transaction_type.value,
        created_at=expense.created_at,
        bank_expense_id=expense.bank_expense_id,
    )


def _to_domain(row: EnvelopeRow) -> Envelope:
    return Envelope(
        envelope_id=row.id,
        name=row.name,
        budget=row.budget,
        expenses=[
            Expense(
                expense_id=expense.id,
                envelope_id=row.id,
                amount=expense.amount,
                memo=expense.memo,
                transaction_type=TransactionType(expense.transaction_type),
                created_at=expense.created_at,
                bank_expense_id=expense.bank_expense_id,
            )
            for expense in row.expenses
        ],
    )


class SqlEnvelopeRepository(EnvelopeRepository):
    """Persist envelopes and expenses in a relational database."""

    backend_name = "sql"

    def __init__(self, database_url: str = "sqlite://", *, engine: Optional[Engine] = None) -> None:
        self._engine = engine if engine is not None else build_engine(database_url)
        Base.metadata.create_all(bind=self._engine)
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        LOGGER.debug("SQL envelope repository bound to %s", self._engine.url)

    @classmethod
    def from_settings(cls, settings) -> "SqlEnvelopeRepository":
        return cls(settings.database_url)

    def save(self, envelope: Envelope) -> Envelope:
        with self._session_factory() as session, session.begin():
            row = EnvelopeRow(name=envelope.name, budget=envelope.budget)
            row.expenses = [_expense_row(expense) for expense in envelope.expenses]
            session.add(row)
            session.flush()
            saved = _to_domain(row)
        LOGGER.debug("Saved envelope %s", saved.envelope_id)
        return saved

    def find_by_id(self, envelope_id: int) -> Optional[Envelope]:
        with self._session_factory() as session:
            row = session.get(EnvelopeRow, envelope_id)
            return _to_domain(row) if row is not None else None

    def find_all(self) -> List[Envelope]:
        with self._session_factory() as session:
            rows = session.scalars(select(EnvelopeRow).order_by(EnvelopeRow.id)).all()
            return [_to_domain(row) for row in rows]

    def delete(self, envelope_id: int) -> None:
        with self._session_factory() as session, session.begin():
            row = session.get(EnvelopeRow, envelope_id)
            if row is not None:
                session.delete(row)

    def update(self, envelope: Envelope) -> Optional[Envelope]:
        updated = self.update_many([envelope])
        return updated[0] if updated else None

    def update_many(self, envelopes: Iterable[Envelope]) -> List[Envelope]:
        """Apply every envelope change inside a single database transaction."""

        with self._session_factory() as session, session.begin():
            rows = []
            for envelope in envelopes:
                row = session.get(EnvelopeRow, envelope.envelope_id)
                if row is None:
                    LOGGER.debug("Ignoring update for unknown envelope %s", envelope.envelope_id)
                    continue
                row.name = envelope.name
                row.budget = envelope.budget
                for expense in envelope.expenses:
                    if expense.expense_id is None:
                        row.expenses.append(_expense_row(expense))
                rows.append(row)
            session.flush()
            return [_to_domain(row) for row in rows]
