"""Mini README: Envelope and expense data structures.

Structure:
    * TransactionType - enum of withdraw versus deposit entries.
    * Expense - dataclass for a single signed movement on an envelope.
    * Envelope - dataclass holding the budget, the ordered expenses and the
      derived balance.

Identifiers are ``None`` until a storage backend persists the object. The
balance is never stored; it is recomputed from the expense list on access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from .errors import ValidationError


class TransactionType(str, Enum):
    """Direction of an expense relative to its envelope."""

    WITHDRAW = "WITHDRAW"
    DEPOSIT = "DEPOSIT"

    @classmethod
    def from_str(cls, value: object) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().upper()
            return cls(normalised)
        except ValueError as error:
            raise ValidationError(f"Unsupported transaction type: {value}") from error


@dataclass(slots=True)
class Expense:
    """A withdraw or deposit recorded against an envelope."""

    amount: int
    memo: str
    transaction_type: TransactionType
    envelope_id: Optional[int] = None
    expense_id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    bank_expense_id: Optional[int] = None

    @property
    def signed_amount(self) -> int:
        if self.transaction_type is TransactionType.WITHDRAW:
            return -self.amount
        return self.amount

    def as_dict(self) -> Dict[str, object]:
        """Export the expense using the JSON field names of the HTTP API."""

        return {
            "id": self.expense_id,
            "envelopeId": self.envelope_id,
            "amount": self.amount,
            "memo": self.memo,
            "transactionType": self.transaction_type.value,
            "date": self.created_at.isoformat(),
            "bankExpenseId": self.bank_expense_id,
        }


@dataclass(slots=True)
class Envelope:
    """Named budget with an append-only list of expenses."""

    name: str
    budget: int
    envelope_id: Optional[int] = None
    expenses: List[Expense] = field(default_factory=list)

    @property
    def balance(self) -> int:
        """Budget minus withdrawals plus deposits."""

        return self.budget + sum(expense.signed_amount for expense in self.expenses)

    def add_expense(self, expense: Expense) -> None:
        expense.envelope_id = self.envelope_id
        self.expenses.append(expense)

    def as_dict(self) -> Dict[str, object]:
        """Export the envelope, its balance and its expenses."""

        return {
            "id": self.envelope_id,
            "name": self.name,
            "budget": self.budget,
            "balance": self.balance,
            "expenses": [expense.as_dict() for expense in self.expenses],
        }
