"""
Read-side projections over items and transactions.

The module-level functions are pure: they take already-loaded records and
never touch the store. `InventoryReports` loads from the store and delegates.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from db.inventory.item import InventoryItem
from db.inventory.transaction import InventoryTransaction
from db.store import InventoryStore
from schemas.inventory import naive_local
from schemas.reports import (
    DailyCount,
    Dashboard,
    DepartmentSummary,
    ItemSummary,
    Receipt,
    ReceiptLine,
)

DateBound = Union[date, datetime, None]


def _within(when: datetime, start: DateBound, end: DateBound) -> bool:
    # Plain dates compare by calendar day, datetimes exactly. Both ends inclusive.
    if isinstance(start, datetime):
        start = naive_local(start)
    if isinstance(end, datetime):
        end = naive_local(end)

    def _cmp_value(bound):
        return when if isinstance(bound, datetime) else when.date()

    if start is not None and _cmp_value(start) < start:
        return False
    if end is not None and _cmp_value(end) > end:
        return False
    return True


def low_stock(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    return [it for it in items if float(it.quantity or 0) <= float(it.min_quantity or 0)]


def summary_by_department(
    transactions: Iterable[InventoryTransaction],
    start: DateBound = None,
    end: DateBound = None,
    type: Optional[str] = "out",
) -> List[DepartmentSummary]:
    acc: Dict[str, DepartmentSummary] = {}
    for tx in transactions:
        if type is not None and tx.type != type:
            continue
        if not _within(tx.date, start, end):
            continue
        row = acc.get(tx.department)
        if row is None:
            row = acc[tx.department] = DepartmentSummary(
                department=tx.department, count=0, line_count=0, total_quantity=0
            )
        row.count += 1
        row.line_count += len(tx.lines)
        row.total_quantity += sum(float(line.quantity) for line in tx.lines)
    return [acc[k] for k in sorted(acc)]


def summary_by_item(
    transactions: Iterable[InventoryTransaction],
    items: Iterable[InventoryItem],
) -> List[ItemSummary]:
    by_id = {it.id: it for it in items}
    acc: Dict[str, ItemSummary] = {}
    for tx in transactions:
        if tx.type != "out":
            continue
        touched = set()
        for line in tx.lines:
            it = by_id.get(line.item_id)
            if it is None:
                continue
            row = acc.get(it.id)
            if row is None:
                row = acc[it.id] = ItemSummary(
                    item_id=it.id, name=it.name, name_ar=it.name_ar, total_quantity=0, event_count=0
                )
            row.total_quantity += float(line.quantity)
            if it.id not in touched:
                row.event_count += 1
                touched.add(it.id)
    return sorted(acc.values(), key=lambda r: (-r.total_quantity, r.name))


def recent_transactions(transactions: Iterable[InventoryTransaction], n: int) -> List[InventoryTransaction]:
    if n <= 0:
        return []
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)[:n]


def daily_transaction_counts(
    transactions: Iterable[InventoryTransaction],
    days: int = 7,
    today: Optional[date] = None,
) -> List[DailyCount]:
    today = today or date.today()
    window = [today - timedelta(days=i) for i in range(days - 1, -1, -1)]
    counts = {d: 0 for d in window}
    for tx in transactions:
        d = tx.date.date()
        if d in counts:
            counts[d] += 1
    return [DailyCount(day=d, count=counts[d]) for d in window]


def dashboard(items: Sequence[InventoryItem], transactions: Iterable[InventoryTransaction]) -> Dashboard:
    return Dashboard(
        total_items=len(items),
        total_dispensed=sum(1 for tx in transactions if tx.type == "out"),
        low_stock_items=len(low_stock(items)),
    )


def resolve_transaction(transaction: InventoryTransaction, items: Iterable[InventoryItem]) -> Receipt:
    by_id = {it.id: it for it in items}
    lines = []
    for line in transaction.lines:
        it = by_id.get(line.item_id)
        lines.append(
            ReceiptLine(
                item_id=line.item_id,
                name=it.name if it else None,
                name_ar=it.name_ar if it else None,
                quantity=float(line.quantity),
                unit=line.unit or (it.unit if it else None),
                capacity=line.capacity,
                notes=line.notes,
            )
        )
    return Receipt(
        id=transaction.id,
        date=transaction.date,
        department=transaction.department,
        type=transaction.type,
        notes=transaction.notes,
        lines=lines,
    )


class InventoryReports:
    def __init__(self, store: InventoryStore):
        self.store = store

    async def _items(self) -> List[InventoryItem]:
        return await self.store.list_all("items")

    async def _transactions(self) -> List[InventoryTransaction]:
        return await self.store.list_all("transactions", index="by-date")

    async def low_stock(self) -> List[InventoryItem]:
        return low_stock(await self._items())

    async def summary_by_department(self, start: DateBound = None, end: DateBound = None) -> List[DepartmentSummary]:
        return summary_by_department(await self._transactions(), start, end)

    async def summary_by_item(self) -> List[ItemSummary]:
        return summary_by_item(await self._transactions(), await self._items())

    async def recent_transactions(self, n: int = 10) -> List[InventoryTransaction]:
        return recent_transactions(await self._transactions(), n)

    async def daily_transaction_counts(self, days: int = 7) -> List[DailyCount]:
        return daily_transaction_counts(await self._transactions(), days)

    async def dashboard(self) -> Dashboard:
        return dashboard(await self._items(), await self._transactions())

    async def receipt(self, transaction: InventoryTransaction) -> Receipt:
        return resolve_transaction(transaction, await self._items())
