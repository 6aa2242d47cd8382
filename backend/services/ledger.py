"""
Stock ledger: the only code path that changes item quantities.

Every write runs inside one store transaction and behind one asyncio.Lock,
so the validate pass and the mutate pass see the same stock.
"""

import asyncio
import logging
import math
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pydantic

from core.errors import InsufficientQuantity, ItemNotFound, TransactionNotFound, ValidationError
from db.inventory.item import InventoryItem
from db.inventory.transaction import InventoryTransaction, TransactionLine
from db.store import InventoryStore, StoreSession, new_id
from schemas.inventory import DispenseLine, ItemCreate, ItemUpdate, StockRequest

logger = logging.getLogger(__name__)

LineInput = Union[DispenseLine, Mapping[str, Any]]


def _parse(schema, data):
    """Build `schema` from a model or mapping, as a domain ValidationError."""
    if isinstance(data, schema):
        return data
    if isinstance(data, pydantic.BaseModel):
        data = data.model_dump()
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg"), field=field) from e


def _requested_by_item(lines: Iterable[DispenseLine]) -> "OrderedDict[str, float]":
    totals: "OrderedDict[str, float]" = OrderedDict()
    for line in lines:
        totals[line.item_id] = totals.get(line.item_id, 0) + line.quantity
    return totals


class StockLedger:
    def __init__(self, store: InventoryStore, lock: Optional[asyncio.Lock] = None):
        self.store = store
        # Single-writer point for every quantity change.
        self._lock = lock or asyncio.Lock()

    # ----- items -----

    async def add_item(self, fields: Union[ItemCreate, Mapping[str, Any]]) -> str:
        payload = _parse(ItemCreate, fields)
        item = InventoryItem(
            id=new_id(),
            name=payload.name,
            name_ar=payload.name_ar,
            category=payload.category,
            quantity=payload.quantity,
            min_quantity=payload.min_quantity,
            unit=payload.unit,
            capacity=payload.capacity,
            last_updated=datetime.now(),
        )
        await self.store.add("items", item)
        logger.info("Added item %s (%s) qty=%g", item.id, item.name, item.quantity)
        return item.id

    async def update_item(self, item_id: str, fields: Union[ItemUpdate, Mapping[str, Any]]) -> InventoryItem:
        payload = _parse(ItemUpdate, fields)
        changes = payload.model_dump(exclude_unset=True)
        for required in ("name", "name_ar", "category", "quantity", "min_quantity"):
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required}: cannot be empty", field=required)

        async with self._lock:
            async with self.store.transaction() as tx:
                item = await tx.get("items", item_id)
                if item is None:
                    raise ItemNotFound(item_id)
                for key, value in changes.items():
                    setattr(item, key, value)
                item.last_updated = datetime.now()
                item = await tx.put("items", item)
        logger.info("Updated item %s fields=%s", item_id, sorted(changes))
        return item

    async def delete_item(self, item_id: str) -> None:
        async with self._lock:
            async with self.store.transaction() as tx:
                if await tx.get("items", item_id) is None:
                    raise ItemNotFound(item_id)
                await tx.delete("items", item_id)
        logger.info("Deleted item %s", item_id)

    async def get_item(self, item_id: str) -> InventoryItem:
        item = await self.store.get("items", item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    async def list_items(self, category: Optional[str] = None) -> List[InventoryItem]:
        if category:
            return await self.store.list_all("items", index="by-category", key=category)
        return await self.store.list_all("items")

    # ----- transactions -----

    async def get_transaction(self, transaction_id: str) -> InventoryTransaction:
        record = await self.store.get("transactions", transaction_id)
        if record is None:
            raise TransactionNotFound(transaction_id)
        return record

    async def list_transactions(self, department: Optional[str] = None) -> List[InventoryTransaction]:
        if department:
            return await self.store.list_all("transactions", index="by-department", key=department)
        return await self.store.list_all("transactions", index="by-date")

    async def dispense(
        self,
        lines: List[LineInput],
        department: str,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
        created_by_user_id: Optional[str] = None,
    ) -> str:
        """
        Take stock out to a department.

        All lines are checked before anything changes; lines naming the same
        item are summed. Raises ItemNotFound / InsufficientQuantity /
        ValidationError and leaves the store untouched in that case.
        Not idempotent: the same request twice dispenses twice.
        """
        request = self._request(lines, department, date, notes, created_by_user_id)
        return await self._apply("out", request)

    async def receive(
        self,
        lines: List[LineInput],
        department: str,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
        created_by_user_id: Optional[str] = None,
    ) -> str:
        """Bring stock in. Every line must name an existing item."""
        request = self._request(lines, department, date, notes, created_by_user_id)
        return await self._apply("in", request)

    def _request(self, lines, department, date, notes, created_by_user_id) -> StockRequest:
        return _parse(
            StockRequest,
            {
                "lines": [line.model_dump() if isinstance(line, pydantic.BaseModel) else line for line in (lines or [])],
                "department": department,
                "date": date,
                "notes": notes,
                "created_by_user_id": created_by_user_id,
            },
        )

    async def _validate(self, tx: StoreSession, direction: str, request: StockRequest) -> Dict[str, InventoryItem]:
        found: Dict[str, InventoryItem] = {}
        for item_id, requested in _requested_by_item(request.lines).items():
            item = await tx.get("items", item_id)
            if item is None:
                logger.warning("%s rejected: item %s not found", direction, item_id)
                raise ItemNotFound(item_id)
            available = float(item.quantity or 0)
            if direction == "out" and available < requested:
                logger.warning(
                    "out rejected: item %s available=%g requested=%g", item_id, available, requested
                )
                raise InsufficientQuantity(item_id, requested, available, name=item.name)
            if direction == "in" and not math.isfinite(available + requested):
                raise ValidationError(f"quantity for {item_id} is out of range", field="quantity")
            found[item_id] = item
        return found

    async def _apply(self, direction: str, request: StockRequest) -> str:
        when = request.date or datetime.now()
        sign = -1 if direction == "out" else 1

        async with self._lock:
            async with self.store.transaction() as tx:
                await self._validate(tx, direction, request)

                now = datetime.now()
                for item_id, requested in _requested_by_item(request.lines).items():
                    item = await tx.get("items", item_id)
                    item.quantity = float(item.quantity or 0) + sign * requested
                    item.last_updated = now
                    await tx.put("items", item)

                record = InventoryTransaction(
                    id=new_id(),
                    date=when,
                    department=request.department,
                    type=direction,
                    notes=request.notes,
                    created_by_user_id=request.created_by_user_id,
                    lines=[
                        TransactionLine(
                            position=i,
                            item_id=line.item_id,
                            quantity=line.quantity,
                            unit=line.unit,
                            capacity=line.capacity,
                            notes=line.notes,
                        )
                        for i, line in enumerate(request.lines)
                    ],
                )
                await tx.add("transactions", record)

        logger.info(
            "Recorded %s transaction %s department=%s lines=%d",
            direction, record.id, request.department, len(request.lines),
        )
        return record.id
