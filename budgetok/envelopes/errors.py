"""Mini README: Error types raised by the envelope ledger.

Structure:
    * LedgerError - common base so transports can catch ledger failures.
    * ValidationError - rejected input shape or range.
    * NotFoundError - unknown envelope identifier or name.
    * InsufficientBalanceError - transfer larger than the source balance.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every failure reported by the ledger."""


class ValidationError(LedgerError, ValueError):
    """Input was missing, of the wrong type, or out of range."""


class NotFoundError(LedgerError, LookupError):
    """No envelope matches the requested identifier."""


class InsufficientBalanceError(LedgerError):
    """The source envelope cannot cover the requested transfer."""

    def __init__(self, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            "Insufficient balance in source envelope."
            f" Available: {available}, Requested: {requested}"
        )
