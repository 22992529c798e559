"""Mini README: Import Bank OK expenses into envelopes.

Structure:
    * SyncReport - counts of imported, duplicate, unmatched and rejected expenses.
    * BankOkSync - resolves envelope names and records new expenses.

Each imported expense keeps its Bank OK id in ``bank_expense_id``; expenses
whose id is already present on any envelope are skipped, so running the
sync repeatedly imports each external expense once. A record the ledger
refuses is counted as rejected and the remaining records are still
imported.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List

from ..envelopes import EnvelopeLedger, NotFoundError, ValidationError
from ..logging_utils import get_logger
from .client import BankOkClient, BankOkExpense

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class SyncReport:
    """Outcome counts of a single sync pass."""

    imported: int = 0
    duplicates: int = 0
    unmatched: int = 0
    rejected: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "imported": self.imported,
            "duplicates": self.duplicates,
            "unmatched": self.unmatched,
            "rejected": self.rejected,
        }


class BankOkSync:
    """Pull expenses from Bank OK and append them to matching envelopes."""

    def __init__(self, ledger: EnvelopeLedger, client: BankOkClient) -> None:
        self.ledger = ledger
        self.client = client
        self._lock = threading.Lock()

    def fetch_expenses(self) -> List[BankOkExpense]:
        """Return the expenses currently listed by Bank OK without importing them."""

        return self.client.fetch_expenses()

    def sync(self) -> SyncReport:
        """Run one import pass; raises ``BankOkError`` if Bank OK is unreachable."""

        external = self.client.fetch_expenses()
        report = SyncReport()
        with self._lock:
            imported_ids = self.ledger.imported_bank_expense_ids()
            for expense in external:
                if expense.expense_id in imported_ids:
                    report.duplicates += 1
                    continue
                try:
                    envelope = self.ledger.find_envelope_by_name(expense.envelope_name)
                except NotFoundError:
                    LOGGER.warning(
                        "Skipping Bank OK expense %s: no envelope named '%s'",
                        expense.expense_id,
                        expense.envelope_name,
                    )
                    report.unmatched += 1
                    continue
                try:
                    self.ledger.add_expense(
                        envelope.envelope_id,
                        expense.price,
                        expense.title,
                        expense.transaction_type,
                        bank_expense_id=expense.expense_id,
                    )
                except ValidationError as error:
                    LOGGER.warning("Rejected Bank OK expense %s: %s", expense.expense_id, error)
                    report.rejected += 1
                    continue
                imported_ids.add(expense.expense_id)
                report.imported += 1
        LOGGER.info(
            "Bank OK sync finished: %s imported, %s duplicates, %s unmatched, %s rejected",
            report.imported,
            report.duplicates,
            report.unmatched,
            report.rejected,
        )
        return report
