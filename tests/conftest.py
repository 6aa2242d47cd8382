import pytest
from fastapi.testclient import TestClient

from db.store import InventoryStore
from main import create_app
from services.ledger import StockLedger


def _sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}"


@pytest.fixture
async def store(tmp_path):
    s = InventoryStore(_sqlite_url(tmp_path))
    await s.init()
    yield s
    await s.close()


@pytest.fixture
def ledger(store):
    return StockLedger(store)


@pytest.fixture
def make_item(ledger):
    async def _make(name="Rice", quantity=10, min_quantity=2, category="Dry goods", **extra):
        fields = {
            "name": name,
            "name_ar": extra.pop("name_ar", f"{name} (ar)"),
            "category": category,
            "quantity": quantity,
            "min_quantity": min_quantity,
        }
        fields.update(extra)
        return await ledger.add_item(fields)

    return _make


@pytest.fixture
def client(tmp_path):
    app = create_app(_sqlite_url(tmp_path))
    with TestClient(app) as c:
        yield c
