"""Persistent store: collection contract, indexes, atomic scope."""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from core.errors import DuplicateKey
from db.inventory.item import InventoryItem
from db.inventory.transaction import InventoryTransaction, TransactionLine
from db.store import InventoryStore, new_id
from db.users import User


def _item(item_id=None, category="Dry goods", quantity=5, **kw):
    return InventoryItem(
        id=item_id or new_id(),
        name=kw.get("name", "Rice"),
        name_ar=kw.get("name_ar", "أرز"),
        category=category,
        quantity=quantity,
        min_quantity=kw.get("min_quantity", 1),
        last_updated=datetime.now(),
    )


def _transaction(department="Kitchen", when=None, tx_type="out"):
    return InventoryTransaction(
        id=new_id(),
        date=when or datetime.now(),
        department=department,
        type=tx_type,
        lines=[TransactionLine(position=0, item_id="A", quantity=1)],
    )


class TestCollections:
    async def test_add_then_get(self, store):
        await store.add("items", _item("A"))
        got = await store.get("items", "A")
        assert got is not None
        assert got.name == "Rice"
        assert got.quantity == 5

    async def test_get_missing_returns_none(self, store):
        assert await store.get("items", "nope") is None

    async def test_add_duplicate_id_raises(self, store):
        await store.add("items", _item("A"))
        with pytest.raises(DuplicateKey):
            await store.add("items", _item("A"))

    async def test_other_integrity_errors_are_not_duplicate_key(self, store):
        await store.add("users", User(id="u1", username="admin", role="admin"))
        with pytest.raises(IntegrityError):
            await store.add("users", User(id="u2", username="admin", role="admin"))
        assert await store.get("users", "u2") is None

    async def test_put_overwrites_by_id(self, store):
        await store.add("items", _item("A", quantity=5))
        await store.put("items", _item("A", quantity=9))
        assert (await store.get("items", "A")).quantity == 9

    async def test_put_inserts_when_absent(self, store):
        await store.put("items", _item("B"))
        assert await store.get("items", "B") is not None

    async def test_delete(self, store):
        await store.add("items", _item("A"))
        await store.delete("items", "A")
        assert await store.get("items", "A") is None

    async def test_delete_missing_is_noop(self, store):
        await store.delete("items", "nope")

    async def test_unknown_collection(self, store):
        with pytest.raises(ValueError):
            await store.list_all("orders")

    async def test_wrong_record_type(self, store):
        with pytest.raises(TypeError):
            await store.add("items", _transaction())

    async def test_users_collection(self, store):
        await store.add("users", User(id="u1", username="admin", role="admin"))
        found = await store.list_all("users", index="by-username", key="admin")
        assert [u.id for u in found] == ["u1"]


class TestIndexes:
    async def test_by_category(self, store):
        await store.add("items", _item("A", category="Dry goods"))
        await store.add("items", _item("B", category="Cleaning"))
        await store.add("items", _item("C", category="Dry goods"))
        rows = await store.list_all("items", index="by-category", key="Dry goods")
        assert sorted(r.id for r in rows) == ["A", "C"]

    async def test_by_date_orders_ascending(self, store):
        late = _transaction(when=datetime(2024, 5, 3))
        early = _transaction(when=datetime(2024, 5, 1))
        await store.add("transactions", late)
        await store.add("transactions", early)
        rows = await store.list_all("transactions", index="by-date")
        assert [r.id for r in rows] == [early.id, late.id]

    async def test_by_department(self, store):
        await store.add("transactions", _transaction("Kitchen"))
        await store.add("transactions", _transaction("Laundry"))
        rows = await store.list_all("transactions", index="by-department", key="Laundry")
        assert len(rows) == 1
        assert rows[0].department == "Laundry"

    async def test_unknown_index(self, store):
        with pytest.raises(ValueError):
            await store.list_all("items", index="by-date")

    async def test_transaction_lines_round_trip_in_order(self, store):
        tx = _transaction()
        tx.lines = [
            TransactionLine(position=0, item_id="B", quantity=2, unit="kg"),
            TransactionLine(position=1, item_id="A", quantity=1, notes="urgent"),
        ]
        await store.add("transactions", tx)
        got = await store.get("transactions", tx.id)
        assert [(ln.item_id, ln.quantity) for ln in got.lines] == [("B", 2), ("A", 1)]
        assert got.lines[0].unit == "kg"
        assert got.lines[1].notes == "urgent"


class TestTransactionScope:
    async def test_rolls_back_on_error(self, store):
        with pytest.raises(RuntimeError):
            async with store.transaction() as tx:
                await tx.add("items", _item("A"))
                raise RuntimeError("boom")
        assert await store.get("items", "A") is None

    async def test_commits_on_exit(self, store):
        async with store.transaction() as tx:
            await tx.add("items", _item("A"))
            await tx.add("items", _item("B"))
        assert len(await store.list_all("items")) == 2


async def test_store_requires_init(tmp_path):
    s = InventoryStore(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    with pytest.raises(RuntimeError):
        await s.get("items", "A")


async def test_in_memory_store_keeps_state_between_calls():
    async with InventoryStore("sqlite+aiosqlite:///:memory:") as s:
        await s.add("items", _item("A"))
        assert await s.get("items", "A") is not None
