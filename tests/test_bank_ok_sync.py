"""Mini README: Tests for the Bank OK client and expense sync.

Structure:
    * client tests - payload parsing and error reporting over httpx.MockTransport.
    * sync tests - import, idempotent re-sync, unmatched names and ledger rejections.
"""

from __future__ import annotations

from typing import List

import httpx
import pytest

from budgetok.bank_ok import BankOkClient, BankOkError, BankOkExpense, BankOkSync
from budgetok.envelopes import EnvelopeLedger, TransactionType
from budgetok.storage import InMemoryEnvelopeRepository

BASE_URL = "http://bank-ok.test"


def _client_for(records: List[dict]) -> BankOkClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/expenses"
        return httpx.Response(200, json=records)

    return BankOkClient(BASE_URL, transport=httpx.MockTransport(handler))


def test_fetch_expenses_parses_records() -> None:
    client = _client_for(
        [
            {"id": 7, "title": "Samsung 25", "price": 250, "envelopeName": "electronics", "transactionType": "WITHDRAW"},
            {"id": 8, "title": "Cashback", "price": 20.0, "envelopeName": "electronics", "transactionType": "deposit"},
            {"id": 9, "title": "Cable", "price": 15, "envelopeName": "electronics"},
        ]
    )

    expenses = client.fetch_expenses()

    assert [expense.expense_id for expense in expenses] == [7, 8, 9]
    assert expenses[0].price == 250
    assert expenses[1].transaction_type is TransactionType.DEPOSIT
    assert expenses[2].transaction_type is TransactionType.WITHDRAW
    assert expenses[0].as_dict()["envelopeName"] == "electronics"


def test_fetch_expenses_reports_server_errors() -> None:
    client = BankOkClient(
        BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="down")),
    )

    with pytest.raises(BankOkError):
        client.fetch_expenses()


def test_fetch_expenses_reports_connection_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = BankOkClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(BankOkError):
        client.fetch_expenses()


def test_fetch_expenses_rejects_malformed_records() -> None:
    client = _client_for([{"id": 1, "title": "No envelope", "price": 10}])

    with pytest.raises(BankOkError):
        client.fetch_expenses()


def test_sync_imports_each_expense_once() -> None:
    """Re-running the sync never duplicates an already imported expense."""

    ledger = EnvelopeLedger(InMemoryEnvelopeRepository())
    electronics = ledger.create_envelope("electronics", 1000)
    sync = BankOkSync(
        ledger,
        _client_for(
            [{"id": 41, "title": "Samsung 25", "price": 250, "envelopeName": "Electronics", "transactionType": "WITHDRAW"}]
        ),
    )

    first = sync.sync()
    second = sync.sync()

    envelope = ledger.get_envelope(electronics.envelope_id)
    assert first.as_dict() == {"imported": 1, "duplicates": 0, "unmatched": 0, "rejected": 0}
    assert second.as_dict() == {"imported": 0, "duplicates": 1, "unmatched": 0, "rejected": 0}
    assert envelope.balance == 750
    assert len(envelope.expenses) == 1
    imported = envelope.expenses[0]
    assert imported.memo == "Samsung 25"
    assert imported.bank_expense_id == 41
    assert imported.as_dict()["bankExpenseId"] == 41


def test_sync_skips_unknown_envelopes() -> None:
    ledger = EnvelopeLedger(InMemoryEnvelopeRepository())
    groceries = ledger.create_envelope("groceries", 300)
    sync = BankOkSync(
        ledger,
        _client_for(
            [
                {"id": 1, "title": "Apples", "price": 30, "envelopeName": "groceries"},
                {"id": 2, "title": "Skis", "price": 900, "envelopeName": "winter sports"},
            ]
        ),
    )

    report = sync.sync()

    assert report.imported == 1
    assert report.unmatched == 1
    assert ledger.get_envelope(groceries.envelope_id).balance == 270


def test_sync_propagates_bank_ok_failures() -> None:
    ledger = EnvelopeLedger(InMemoryEnvelopeRepository())
    ledger.create_envelope("groceries", 300)
    sync = BankOkSync(
        ledger,
        BankOkClient(BASE_URL, transport=httpx.MockTransport(lambda request: httpx.Response(500))),
    )

    with pytest.raises(BankOkError):
        sync.sync()
    assert ledger.list_envelopes()[0].expenses == []


@pytest.mark.parametrize(
    "raw_price",
    [b"-5", b"Infinity", b"-Infinity", b"NaN"],
)
def test_fetch_expenses_rejects_unusable_prices(raw_price: bytes) -> None:
    """Negative and non-finite prices are reported as malformed Bank OK data."""

    body = b'[{"id": 1, "title": "Broken", "price": ' + raw_price + b', "envelopeName": "electronics"}]'
    client = BankOkClient(
        BASE_URL,
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, content=body, headers={"content-type": "application/json"})
        ),
    )

    with pytest.raises(BankOkError):
        client.fetch_expenses()


class _StaticClient:
    def __init__(self, expenses: List[BankOkExpense]) -> None:
        self._expenses = expenses

    def fetch_expenses(self) -> List[BankOkExpense]:
        return list(self._expenses)


def test_sync_counts_ledger_rejections_and_continues() -> None:
    """A record the ledger refuses does not stop the remaining imports."""

    ledger = EnvelopeLedger(InMemoryEnvelopeRepository())
    electronics = ledger.create_envelope("electronics", 100)
    sync = BankOkSync(
        ledger,
        _StaticClient(
            [
                BankOkExpense(expense_id=1, title="Bad", price=-5, envelope_name="electronics"),
                BankOkExpense(expense_id=2, title="Cable", price=10, envelope_name="electronics"),
            ]
        ),
    )

    report = sync.sync()

    assert report.as_dict() == {"imported": 1, "duplicates": 0, "unmatched": 0, "rejected": 1}
    envelope = ledger.get_envelope(electronics.envelope_id)
    assert [expense.bank_expense_id for expense in envelope.expenses] == [2]
    assert envelope.balance == 90
