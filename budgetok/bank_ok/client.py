"""Mini README: HTTP client for the external Bank OK expense service.

Structure:
    * BankOkError - raised for transport failures and malformed payloads.
    * BankOkExpense - dataclass describing one externally recorded expense.
    * BankOkClient - thin ``httpx`` wrapper listing Bank OK expenses.

The client accepts an optional ``httpx`` transport so tests can serve
canned responses through ``httpx.MockTransport``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..envelopes.models import TransactionType
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

EXPENSES_PATH = "/api/expenses"


class BankOkError(Exception):
    """Bank OK could not be reached or returned an unusable response."""


@dataclass(slots=True)
class BankOkExpense:
    """Expense recorded in Bank OK and tagged with a target envelope name."""

    expense_id: int
    title: str
    price: int
    envelope_name: str
    transaction_type: TransactionType = TransactionType.WITHDRAW

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "BankOkExpense":
        """Parse the camelCase JSON record returned by Bank OK."""

        try:
            price = payload["price"]
            if isinstance(price, bool) or not isinstance(price, (int, float)):
                raise TypeError(f"price must be numeric, got {price!r}")
            if not math.isfinite(price) or price < 0:
                raise ValueError(f"price must be a finite non-negative number, got {price!r}")
            return cls(
                expense_id=int(payload["id"]),
                title=str(payload.get("title") or ""),
                price=int(price),
                envelope_name=str(payload["envelopeName"]),
                transaction_type=TransactionType.from_str(
                    payload.get("transactionType") or TransactionType.WITHDRAW.value
                ),
            )
        except (KeyError, TypeError, ValueError, OverflowError) as error:
            raise BankOkError(f"Malformed Bank OK expense: {payload!r}") from error

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.expense_id,
            "title": self.title,
            "price": self.price,
            "envelopeName": self.envelope_name,
            "transactionType": self.transaction_type.value,
        }


class BankOkClient:
    """Fetch expenses from Bank OK over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> "BankOkClient":
        return cls(settings.bank_ok_base_url, timeout=settings.bank_ok_timeout_seconds)

    def fetch_expenses(self) -> List[BankOkExpense]:
        """Return every expense currently recorded in Bank OK."""

        url = f"{self.base_url}{EXPENSES_PATH}"
        LOGGER.debug("Fetching Bank OK expenses from %s", url)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as error:
            raise BankOkError(f"Bank OK request to {url} failed: {error}") from error
        except ValueError as error:
            raise BankOkError(f"Bank OK returned invalid JSON from {url}") from error

        if isinstance(payload, dict):
            payload = payload.get("expenses", [])
        if not isinstance(payload, list):
            raise BankOkError("Bank OK expense listing must be a JSON array")
        expenses = [BankOkExpense.from_payload(record) for record in payload]
        LOGGER.info("Fetched %s expenses from Bank OK", len(expenses))
        return expenses
