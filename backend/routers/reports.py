from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from core.config import settings
from core.deps import get_reports, get_store
from core.errors import ExportError
from db.store import InventoryStore
from schemas.inventory import TransactionOut
from schemas.reports import DailyCount, Dashboard, DepartmentSummary, ItemSummary
from services.export import render_inventory_report
from services.reports import InventoryReports

router = APIRouter()


@router.get("/dashboard", response_model=Dashboard)
async def get_dashboard(reports: InventoryReports = Depends(get_reports)):
    return await reports.dashboard()


@router.get("/departments", response_model=List[DepartmentSummary])
async def get_department_summary(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    reports: InventoryReports = Depends(get_reports),
):
    if from_date and to_date and from_date > to_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="from_date must be <= to_date")
    return await reports.summary_by_department(from_date, to_date)


@router.get("/items", response_model=List[ItemSummary])
async def get_item_summary(reports: InventoryReports = Depends(get_reports)):
    return await reports.summary_by_item()


@router.get("/daily", response_model=List[DailyCount])
async def get_daily_counts(
    days: int = Query(7, ge=1, le=366),
    reports: InventoryReports = Depends(get_reports),
):
    return await reports.daily_transaction_counts(days)


@router.get("/recent", response_model=List[TransactionOut])
async def get_recent_transactions(
    limit: int = Query(10, ge=1, le=200),
    reports: InventoryReports = Depends(get_reports),
):
    return await reports.recent_transactions(limit)


@router.get("/inventory.pdf")
async def export_inventory_report(
    language: str = Query(settings.default_language, pattern="^(en|ar)$"),
    store: InventoryStore = Depends(get_store),
):
    items = await store.list_all("items")
    transactions = await store.list_all("transactions", index="by-date")
    try:
        pdf = render_inventory_report(items, transactions, language)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="inventory-report.pdf"'},
    )
