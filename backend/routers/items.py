from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from core.deps import get_ledger, get_reports
from core.errors import DuplicateKey, ItemNotFound, ValidationError
from schemas.inventory import ItemCreate, ItemOut, ItemUpdate
from services.ledger import StockLedger
from services.reports import InventoryReports

router = APIRouter()


@router.get("", response_model=List[ItemOut])
async def list_items(
    category: Optional[str] = None,
    ledger: StockLedger = Depends(get_ledger),
):
    return await ledger.list_items(category=category)


@router.get("/low-stock", response_model=List[ItemOut])
async def list_low_stock_items(reports: InventoryReports = Depends(get_reports)):
    return await reports.low_stock()


@router.get("/{item_id}", response_model=ItemOut)
async def get_item(item_id: str, ledger: StockLedger = Depends(get_ledger)):
    try:
        return await ledger.get_item(item_id)
    except ItemNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(payload: ItemCreate, ledger: StockLedger = Depends(get_ledger)):
    try:
        item_id = await ledger.add_item(payload)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateKey as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return await ledger.get_item(item_id)


@router.patch("/{item_id}", response_model=ItemOut)
async def update_item(item_id: str, payload: ItemUpdate, ledger: StockLedger = Depends(get_ledger)):
    try:
        return await ledger.update_item(item_id, payload)
    except ItemNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{item_id}", response_model=Dict)
async def delete_item(item_id: str, ledger: StockLedger = Depends(get_ledger)):
    try:
        await ledger.delete_item(item_id)
    except ItemNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return {"ok": True}
