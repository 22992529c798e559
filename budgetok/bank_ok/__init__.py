"""Mini README: Integration with the external Bank OK expense service.

``client`` talks HTTP to Bank OK; ``sync`` turns its expenses into envelope
withdrawals and deposits without importing the same record twice.
"""

from .client import BankOkClient, BankOkError, BankOkExpense
from .sync import BankOkSync, SyncReport

__all__ = ["BankOkClient", "BankOkError", "BankOkExpense", "BankOkSync", "SyncReport"]
