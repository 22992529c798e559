"""Mini README: Envelope ledger enforcing balances and transfers.

Structure:
    * EnvelopeLedger - validates input, appends expenses and moves funds
      between envelopes on top of an ``EnvelopeRepository``.

Every operation runs under one re-entrant lock. A transfer checks the
source balance and writes both envelopes through a single ``update_many``
call inside that lock, so concurrent callers never see half a transfer and
never pass the balance check against a stale balance. Nothing is written
when a check fails.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, List, Optional, Set

from ..logging_utils import get_logger
from .errors import InsufficientBalanceError, NotFoundError, ValidationError
from .models import Envelope, Expense, TransactionType

if TYPE_CHECKING:
    from ..storage.base import EnvelopeRepository

LOGGER = get_logger(__name__)


def _require_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Envelope name must be a non-empty string.")
    return name


def _require_non_negative_int(value: object, field_name: str) -> int:
    # bool is an int subclass but never a valid amount
    if value is None:
        raise ValidationError(f"{field_name} is required.")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer, got {value!r}.")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative, got {value}.")
    return value


class EnvelopeLedger:
    """Create, query and mutate envelopes through a storage backend."""

    def __init__(self, repository: "EnvelopeRepository") -> None:
        self._repository = repository
        self._lock = threading.RLock()
        LOGGER.debug("Envelope ledger initialised with %s storage", repository.backend_name)

    @property
    def repository(self) -> "EnvelopeRepository":
        return self._repository

    def _load(self, envelope_id: int, message: Optional[str] = None) -> Envelope:
        envelope = self._repository.find_by_id(envelope_id)
        if envelope is None:
            raise NotFoundError(message or f"Envelope {envelope_id} not found")
        return envelope

    def create_envelope(self, name: object, budget: object) -> Envelope:
        """Create an empty envelope whose balance equals its budget."""

        envelope = Envelope(
            name=_require_name(name),
            budget=_require_non_negative_int(budget, "budget"),
        )
        with self._lock:
            saved = self._repository.save(envelope)
        LOGGER.info("Created envelope %s '%s' with budget %s", saved.envelope_id, saved.name, saved.budget)
        return saved

    def get_envelope(self, envelope_id: int) -> Envelope:
        """Retrieve an envelope, raising ``NotFoundError`` when missing."""

        with self._lock:
            return self._load(envelope_id)

    def list_envelopes(self) -> List[Envelope]:
        with self._lock:
            return self._repository.find_all()

    def find_envelope_by_name(self, name: str) -> Envelope:
        """Return the first envelope whose name matches, ignoring case."""

        wanted = name.strip().casefold()
        with self._lock:
            for envelope in self._repository.find_all():
                if envelope.name.strip().casefold() == wanted:
                    return envelope
        raise NotFoundError(f"Envelope named '{name}' not found")

    def update_envelope(self, envelope_id: int, name: object, budget: object) -> Envelope:
        """Replace name and budget, leaving expenses untouched."""

        new_name = _require_name(name)
        new_budget = _require_non_negative_int(budget, "budget")
        with self._lock:
            envelope = self._load(envelope_id)
            envelope.name = new_name
            envelope.budget = new_budget
            updated = self._repository.update(envelope)
        LOGGER.info("Updated envelope %s to '%s' with budget %s", envelope_id, new_name, new_budget)
        return updated

    def delete_envelope(self, envelope_id: int) -> None:
        """Remove an envelope and its expenses; missing ids are ignored."""

        with self._lock:
            self._repository.delete(envelope_id)
        LOGGER.info("Deleted envelope %s", envelope_id)

    def add_expense(
        self,
        envelope_id: int,
        amount: object,
        memo: Optional[str],
        transaction_type: object,
        *,
        bank_expense_id: Optional[int] = None,
    ) -> Envelope:
        """Append a withdraw or deposit and return the updated envelope."""

        expense = Expense(
            amount=_require_non_negative_int(amount, "amount"),
            memo=memo or "",
            transaction_type=TransactionType.from_str(transaction_type),
            bank_expense_id=bank_expense_id,
        )
        with self._lock:
            envelope = self._load(envelope_id)
            envelope.add_expense(expense)
            updated = self._repository.update(envelope)
        LOGGER.info(
            "Recorded %s of %s on envelope %s (balance %s)",
            expense.transaction_type.value,
            expense.amount,
            envelope_id,
            updated.balance,
        )
        return updated

    def transfer(self, source_id: int, target_id: int, amount: object, memo: Optional[str]) -> Envelope:
        """Move ``amount`` from source to target and return the source envelope.

        Checks run in order: amount, source existence, target existence,
        source balance. The first failing check raises and nothing is
        written. Transferring the full balance or zero is allowed.
        """

        amount = _require_non_negative_int(amount, "amount")
        memo = memo or ""
        with self._lock:
            source = self._load(source_id, "source envelope not found")
            if target_id == source_id:
                target = source
            else:
                target = self._load(target_id, "target envelope not found")

            available = source.balance
            if available < amount:
                LOGGER.warning(
                    "Rejected transfer of %s from envelope %s: only %s available",
                    amount,
                    source_id,
                    available,
                )
                raise InsufficientBalanceError(available=available, requested=amount)

            source.add_expense(Expense(amount=amount, memo=memo, transaction_type=TransactionType.WITHDRAW))
            target.add_expense(Expense(amount=amount, memo=memo, transaction_type=TransactionType.DEPOSIT))
            changed = [source] if target is source else [source, target]
            updated = self._repository.update_many(changed)
        LOGGER.info("Transferred %s from envelope %s to envelope %s", amount, source_id, target_id)
        return updated[0]

    def imported_bank_expense_ids(self) -> Set[int]:
        """Return every Bank OK reference already recorded on an envelope."""

        with self._lock:
            return {
                expense.bank_expense_id
                for envelope in self._repository.find_all()
                for expense in envelope.expenses
                if expense.bank_expense_id is not None
            }
