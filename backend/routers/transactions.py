from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from core.config import settings
from core.deps import get_ledger, get_reports
from core.errors import ExportError, InsufficientQuantity, ItemNotFound, TransactionNotFound, ValidationError
from schemas.inventory import StockRequest, TransactionCreated, TransactionOut
from services.export import render_receipt
from services.ledger import StockLedger
from services.reports import InventoryReports, recent_transactions

router = APIRouter()


def _insufficient_detail(e: InsufficientQuantity) -> dict:
    return {
        "message": str(e),
        "item_id": e.item_id,
        "requested": e.requested,
        "available": e.available,
        "shortfall": e.shortfall,
    }


async def _record(direction: str, payload: StockRequest, ledger: StockLedger) -> TransactionCreated:
    apply = ledger.dispense if direction == "out" else ledger.receive
    try:
        tx_id = await apply(
            payload.lines,
            payload.department,
            date=payload.date,
            notes=payload.notes,
            created_by_user_id=payload.created_by_user_id,
        )
    except ItemNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Inventory item not found", "item_id": e.item_id},
        )
    except InsufficientQuantity as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_insufficient_detail(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return TransactionCreated(id=tx_id, type=direction)


@router.get("", response_model=List[TransactionOut])
async def list_transactions(
    department: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    limit: int = Query(200, ge=1, le=1000),
    ledger: StockLedger = Depends(get_ledger),
):
    rows = await ledger.list_transactions(department=department)
    if from_date or to_date:
        rows = [
            tx for tx in rows
            if (from_date is None or tx.date.date() >= from_date)
            and (to_date is None or tx.date.date() <= to_date)
        ]
    return recent_transactions(rows, limit)


@router.post("/dispense", response_model=TransactionCreated, status_code=status.HTTP_201_CREATED)
async def dispense(payload: StockRequest, ledger: StockLedger = Depends(get_ledger)):
    return await _record("out", payload, ledger)


@router.post("/receive", response_model=TransactionCreated, status_code=status.HTTP_201_CREATED)
async def receive(payload: StockRequest, ledger: StockLedger = Depends(get_ledger)):
    return await _record("in", payload, ledger)


@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_transaction(transaction_id: str, ledger: StockLedger = Depends(get_ledger)):
    try:
        return await ledger.get_transaction(transaction_id)
    except TransactionNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")


@router.get("/{transaction_id}/receipt")
async def get_receipt(
    transaction_id: str,
    language: str = Query(settings.default_language, pattern="^(en|ar)$"),
    ledger: StockLedger = Depends(get_ledger),
    reports: InventoryReports = Depends(get_reports),
):
    try:
        tx = await ledger.get_transaction(transaction_id)
    except TransactionNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")

    receipt = await reports.receipt(tx)
    try:
        pdf = render_receipt(receipt, language)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="receipt-{transaction_id}.pdf"'},
    )
