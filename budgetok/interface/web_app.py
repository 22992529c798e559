"""Mini README: FastAPI application exposing the envelope ledger.

Structure:
    * create_application - application factory wiring routes to a ledger.
    * /api/envelopes... - JSON CRUD, expenses and transfers.
    * /api/bankok/... - Bank OK listing and sync.
    * /envelopes - HTML overview rendered with Jinja2.

The factory accepts an existing ledger and sync job so tests can inject
their own; without arguments it builds both from ``get_settings()``, which
is what ``uvicorn --factory`` does. Ledger errors are translated to HTTP
status codes here: validation and insufficient balance to 400, unknown
envelopes to 404 and Bank OK failures to 502.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from ..bank_ok import BankOkClient, BankOkError, BankOkSync
from ..configuration import get_settings
from ..envelopes import (
    EnvelopeLedger,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from ..logging_utils import get_logger
from ..storage import REGISTRY
from .schemas import EnvelopeRequest, ExpenseRequest, TransferRequest

LOGGER = get_logger(__name__)


def _describe_validation_error(error: RequestValidationError) -> str:
    parts = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()) if part != "body")
        parts.append(f"{location}: {issue.get('msg')}" if location else str(issue.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_application(
    ledger: Optional[EnvelopeLedger] = None,
    bank_ok_sync: Optional[BankOkSync] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = get_settings()
    if ledger is None:
        ledger = EnvelopeLedger(REGISTRY.create(settings.storage_backend, settings))
    if bank_ok_sync is None:
        bank_ok_sync = BankOkSync(ledger, BankOkClient.from_settings(settings))

    app = FastAPI(title="Budget OK", version="0.1.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    app.state.ledger = ledger
    app.state.bank_ok_sync = bank_ok_sync

    @app.exception_handler(RequestValidationError)
    async def request_validation_failed(request: Request, error: RequestValidationError) -> JSONResponse:
        detail = _describe_validation_error(error)
        LOGGER.debug("Rejected %s %s: %s", request.method, request.url.path, detail)
        return JSONResponse({"detail": detail}, status_code=400)

    @app.get("/", response_class=HTMLResponse)
    @app.get("/envelopes", response_class=HTMLResponse)
    def envelopes_page(request: Request) -> HTMLResponse:
        """Render the envelope overview with balances and recent expenses."""

        envelopes = ledger.list_envelopes()
        LOGGER.debug("Rendering overview with %s envelopes", len(envelopes))
        return templates.TemplateResponse(
            request,
            "envelopes.html",
            {
                "envelopes": envelopes,
                "total_budget": sum(envelope.budget for envelope in envelopes),
                "total_balance": sum(envelope.balance for envelope in envelopes),
            },
        )

    @app.get("/api/envelopes")
    def list_envelopes(name: Optional[str] = None) -> JSONResponse:
        """Return all envelopes, or only the one matching ``name``."""

        if name is not None:
            try:
                envelopes = [ledger.find_envelope_by_name(name)]
            except NotFoundError as error:
                raise HTTPException(status_code=404, detail=str(error)) from error
        else:
            envelopes = ledger.list_envelopes()
        return JSONResponse([envelope.as_dict() for envelope in envelopes])

    @app.post("/api/envelopes")
    def create_envelope(payload: EnvelopeRequest) -> JSONResponse:
        try:
            envelope = ledger.create_envelope(payload.name, payload.budget)
        except ValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(envelope.as_dict(), status_code=201)

    @app.post("/api/envelopes/transfer")
    def transfer(payload: TransferRequest) -> JSONResponse:
        """Move funds between envelopes, returning the updated source."""

        try:
            source = ledger.transfer(
                payload.source_envelope_id,
                payload.target_envelope_id,
                payload.amount,
                payload.memo,
            )
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except (InsufficientBalanceError, ValidationError) as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse({"message": "Transfer successful", "envelope": source.as_dict()})

    @app.get("/api/envelopes/{envelope_id}")
    def get_envelope(envelope_id: int) -> JSONResponse:
        try:
            envelope = ledger.get_envelope(envelope_id)
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse(envelope.as_dict())

    @app.put("/api/envelopes/{envelope_id}")
    def update_envelope(envelope_id: int, payload: EnvelopeRequest) -> JSONResponse:
        try:
            envelope = ledger.update_envelope(envelope_id, payload.name, payload.budget)
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except ValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(envelope.as_dict())

    @app.delete("/api/envelopes/{envelope_id}", status_code=204)
    def delete_envelope(envelope_id: int) -> Response:
        ledger.delete_envelope(envelope_id)
        return Response(status_code=204)

    @app.post("/api/envelopes/{envelope_id}/expenses")
    def add_expense(envelope_id: int, payload: ExpenseRequest) -> JSONResponse:
        """Record a withdraw or deposit and return the updated envelope."""

        try:
            envelope = ledger.add_expense(
                envelope_id,
                payload.amount,
                payload.memo,
                payload.transaction_type,
            )
        except NotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except ValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(envelope.as_dict(), status_code=201)

    @app.get("/api/bankok/expenses")
    def bank_ok_expenses() -> JSONResponse:
        """Proxy the expenses currently recorded in Bank OK."""

        try:
            expenses = bank_ok_sync.fetch_expenses()
        except BankOkError as error:
            raise HTTPException(status_code=502, detail=str(error)) from error
        return JSONResponse([expense.as_dict() for expense in expenses])

    @app.post("/api/bankok/sync-bank-ok", status_code=204)
    def sync_bank_ok() -> Response:
        """Import new Bank OK expenses into their envelopes."""

        try:
            report = bank_ok_sync.sync()
        except BankOkError as error:
            LOGGER.error("Bank OK sync failed: %s", error)
            raise HTTPException(status_code=502, detail=str(error)) from error
        LOGGER.info("Bank OK sync via API: %s", report.as_dict())
        return Response(status_code=204)

    return app
