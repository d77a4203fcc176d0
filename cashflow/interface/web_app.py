"""Mini README: FastAPI interface for the cash flow tracker.

Structure:
    * create_application - application factory wiring routes to one ledger.

The routes are a thin caller of the ledger: they accept drafts, apply quick
filters and date ranges to the displayed view, and stream the CSV download.
Rejected submissions return 400, unknown ids 404 and deletions without
``confirm=true`` 409.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from ..configuration import CashflowSettings, get_settings
from ..export import CSV_MEDIA_TYPE, DEFAULT_FILENAME, render_csv
from ..finance import (
    Ledger,
    LedgerError,
    Transaction,
    TransactionDraft,
    TransactionNotFoundError,
)
from ..finance.session import open_ledger
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def _rows(transactions: List[Transaction]) -> List[Dict[str, object]]:
    return [transaction.as_dict() for transaction in transactions]


def _summary_payload(ledger: Ledger) -> Dict[str, object]:
    return {
        key: str(value) if isinstance(value, Decimal) else value
        for key, value in ledger.summary().items()
    }


def create_application(
    ledger: Optional[Ledger] = None,
    settings: Optional[CashflowSettings] = None,
) -> FastAPI:
    """Create the FastAPI application around a single ledger instance.

    Settings are only loaded when no ledger is injected.
    """

    app = FastAPI(title="Cash Flow Tracker", version="0.1.0")
    if ledger is None:
        settings = settings or get_settings()
        ledger = open_ledger(settings)
    export_filename = settings.export_filename if settings is not None else DEFAULT_FILENAME

    def _view_payload() -> JSONResponse:
        start, end = ledger.date_range
        return JSONResponse(
            {
                "active_filter": ledger.active_filter,
                "start_date": start.isoformat() if start else None,
                "end_date": end.isoformat() if end else None,
                "transactions": _rows(ledger.displayed()),
            }
        )

    @app.get("/transactions")
    async def list_transactions() -> JSONResponse:
        """Return the displayed view (quick filter and date range applied)."""

        return _view_payload()

    @app.get("/transactions/{transaction_id}")
    async def get_transaction(transaction_id: int) -> JSONResponse:
        try:
            transaction = ledger.get(transaction_id)
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse(transaction.as_dict())

    @app.post("/transactions", status_code=201)
    async def add_transaction(draft: TransactionDraft) -> JSONResponse:
        """Validate and append a transaction."""

        try:
            transaction = ledger.add(draft)
        except LedgerError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(transaction.as_dict(), status_code=201)

    @app.put("/transactions/{transaction_id}")
    async def update_transaction(transaction_id: int, draft: TransactionDraft) -> JSONResponse:
        try:
            transaction = ledger.update(transaction_id, draft)
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except LedgerError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(transaction.as_dict())

    @app.delete("/transactions/{transaction_id}")
    async def delete_transaction(transaction_id: int, confirm: bool = Query(False)) -> JSONResponse:
        """Delete a transaction; callers must pass ``confirm=true``."""

        try:
            removed = ledger.remove(transaction_id, confirmed=confirm)
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        if removed is None:
            raise HTTPException(status_code=409, detail="Deletion must be confirmed.")
        return JSONResponse({"removed": removed.as_dict(), **_summary_payload(ledger)})

    @app.get("/summary")
    async def summary() -> JSONResponse:
        return JSONResponse(_summary_payload(ledger))

    @app.post("/filters/quick")
    async def quick_filter(selection: str = Query(...)) -> JSONResponse:
        """Switch between "all", "income" and "expense" views."""

        try:
            ledger.apply_quick_filter(selection)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return _view_payload()

    @app.post("/filters/date-range")
    async def date_range(
        start: Optional[date] = Query(None),
        end: Optional[date] = Query(None),
    ) -> JSONResponse:
        ledger.set_date_range(start, end)
        return _view_payload()

    @app.post("/filters/clear")
    async def clear_filters() -> JSONResponse:
        ledger.clear_filters()
        return _view_payload()

    @app.get("/export.csv")
    async def export_csv() -> Response:
        """Download the active view (or the whole ledger) as CSV."""

        rows = ledger.export_rows()
        LOGGER.info("Serving CSV export with %s rows", len(rows))
        return Response(
            content=render_csv(rows),
            media_type=CSV_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{export_filename}"'},
        )

    return app
