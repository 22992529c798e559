"""Mini README: Envelope budgeting domain for Budget OK.

Groups the envelope and expense models, the ledger that enforces balances
and transfers, and the errors it raises. Storage is injected, so the same
ledger runs on the in-memory and SQL backends.
"""

from .errors import InsufficientBalanceError, LedgerError, NotFoundError, ValidationError
from .ledger import EnvelopeLedger
from .models import Envelope, Expense, TransactionType

__all__ = [
    "Envelope",
    "EnvelopeLedger",
    "Expense",
    "InsufficientBalanceError",
    "LedgerError",
    "NotFoundError",
    "TransactionType",
    "ValidationError",
]
