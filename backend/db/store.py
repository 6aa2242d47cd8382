"""
Local persistent store.

Three collections keyed by `id`:
- items         (index: by-category)
- transactions  (indexes: by-date, by-department)
- users         (index: by-username)

`InventoryStore` is built explicitly and owned by whoever created it
(app lifespan, script, test). Every call on the store runs in its own short
unit of work; `transaction()` hands out a `StoreSession` where several calls
share one database transaction.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Tuple, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.errors import DuplicateKey, ValidationError
from .database import Base
from .inventory.item import InventoryItem
from .inventory.transaction import InventoryTransaction
from .users import User

logger = logging.getLogger(__name__)


COLLECTIONS: Dict[str, Tuple[Type[Base], Dict[str, str]]] = {
    "items": (InventoryItem, {"by-category": "category"}),
    "transactions": (InventoryTransaction, {"by-date": "date", "by-department": "department"}),
    "users": (User, {"by-username": "username"}),
}


def new_id() -> str:
    return str(uuid.uuid4())


def _resolve(collection: str) -> Tuple[Type[Base], Dict[str, str]]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}") from None


def _check_record(collection: str, record) -> Type[Base]:
    model, _ = _resolve(collection)
    if not isinstance(record, model):
        raise TypeError(f"{collection} expects {model.__name__}, got {type(record).__name__}")
    if not getattr(record, "id", None):
        raise ValidationError(f"{collection} record has no id", field="id")
    return model


class StoreSession:
    """Collection operations bound to one AsyncSession / database transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, collection: str, key: str):
        model, _ = _resolve(collection)
        return await self.session.get(model, key)

    async def put(self, collection: str, record):
        _check_record(collection, record)
        merged = await self.session.merge(record)
        await self.session.flush()
        return merged

    async def add(self, collection: str, record):
        model = _check_record(collection, record)
        if await self.session.get(model, record.id) is not None:
            raise DuplicateKey(collection, record.id)
        self.session.add(record)
        await self.session.flush()
        return record

    async def delete(self, collection: str, key: str) -> None:
        record = await self.get(collection, key)
        if record is None:
            return
        await self.session.delete(record)
        await self.session.flush()

    async def list_all(self, collection: str, index: Optional[str] = None, key=None) -> List:
        model, indexes = _resolve(collection)
        stmt = select(model)
        if index is not None:
            if index not in indexes:
                raise ValueError(f"Unknown index {index!r} on {collection}")
            column = getattr(model, indexes[index])
            if key is not None:
                stmt = stmt.where(column == key)
            stmt = stmt.order_by(column)
        elif key is not None:
            raise ValueError("key requires an index")
        res = await self.session.execute(stmt)
        return list(res.scalars().all())


class InventoryStore:
    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine = None
        self._session_maker = None

    async def init(self) -> "InventoryStore":
        if self.engine is None:
            kwargs = {"echo": self.echo}
            if ":memory:" in self.database_url:
                # one shared connection, otherwise every checkout sees an empty db
                kwargs["poolclass"] = StaticPool
            self.engine = create_async_engine(self.database_url, **kwargs)
            self._session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Store ready at %s", self.engine.url.render_as_string(hide_password=True))
        return self

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self._session_maker = None

    async def __aenter__(self) -> "InventoryStore":
        return await self.init()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreSession]:
        """Commit on normal exit, roll back when the block raises."""
        if self._session_maker is None:
            raise RuntimeError("InventoryStore.init() has not been called")
        async with self._session_maker() as session:
            async with session.begin():
                yield StoreSession(session)

    async def get(self, collection: str, key: str):
        async with self.transaction() as tx:
            return await tx.get(collection, key)

    async def put(self, collection: str, record):
        async with self.transaction() as tx:
            return await tx.put(collection, record)

    async def add(self, collection: str, record):
        async with self.transaction() as tx:
            return await tx.add(collection, record)

    async def delete(self, collection: str, key: str) -> None:
        async with self.transaction() as tx:
            await tx.delete(collection, key)

    async def list_all(self, collection: str, index: Optional[str] = None, key=None) -> List:
        async with self.transaction() as tx:
            return await tx.list_all(collection, index=index, key=key)
