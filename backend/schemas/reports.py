from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class DepartmentSummary(BaseModel):
    department: str
    count: int
    line_count: int
    total_quantity: float


class ItemSummary(BaseModel):
    item_id: str
    name: str
    name_ar: str
    total_quantity: float
    event_count: int


class DailyCount(BaseModel):
    day: date
    count: int


class Dashboard(BaseModel):
    total_items: int
    total_dispensed: int
    low_stock_items: int


class ReceiptLine(BaseModel):
    item_id: str
    name: Optional[str] = None
    name_ar: Optional[str] = None
    quantity: float
    unit: Optional[str] = None
    capacity: Optional[str] = None
    notes: Optional[str] = None


class Receipt(BaseModel):
    """A transaction with its lines joined to item display names."""
    id: str
    date: datetime
    department: str
    type: str
    notes: Optional[str] = None
    lines: List[ReceiptLine]
