import argparse
import asyncio
import sys
from pathlib import Path

"""
Seed demo data (a placeholder admin, stock items, a few dispenses).

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.config import settings  # noqa: E402
from db.store import InventoryStore, new_id  # noqa: E402
from db.users import User  # noqa: E402
from services.ledger import StockLedger  # noqa: E402


DEMO_ITEMS = [
    {"name": "Rice", "name_ar": "أرز", "category": "Dry goods", "quantity": 120, "min_quantity": 20, "unit": "kg", "capacity": "25 kg sack"},
    {"name": "Sugar", "name_ar": "سكر", "category": "Dry goods", "quantity": 40, "min_quantity": 10, "unit": "kg"},
    {"name": "Cooking oil", "name_ar": "زيت طبخ", "category": "Liquids", "quantity": 30, "min_quantity": 8, "unit": "L", "capacity": "4 x 5L"},
    {"name": "Dish soap", "name_ar": "صابون صحون", "category": "Cleaning", "quantity": 6, "min_quantity": 6, "unit": "bottle"},
    {"name": "Paper towels", "name_ar": "مناديل ورقية", "category": "Cleaning", "quantity": 48, "min_quantity": 12, "unit": "roll"},
]


async def get_or_create_admin(store: InventoryStore, username: str) -> User:
    existing = await store.list_all("users", index="by-username", key=username)
    if existing:
        return existing[0]
    user = User(id=new_id(), username=username, display_name="Storekeeper", role="admin")
    await store.add("users", user)
    return user


async def seed(database_url: str, with_dispenses: bool) -> None:
    async with InventoryStore(database_url) as store:
        ledger = StockLedger(store)
        admin = await get_or_create_admin(store, "admin")

        known = {it.name for it in await store.list_all("items")}
        ids = {}
        for fields in DEMO_ITEMS:
            if fields["name"] in known:
                continue
            ids[fields["name"]] = await ledger.add_item(fields)
        print(f"[seed_demo_data] created_items={len(ids)}")

        if with_dispenses and ids:
            first = list(ids.values())
            await ledger.dispense(
                [{"item_id": item_id, "quantity": 1} for item_id in first[:2]],
                "Kitchen",
                created_by_user_id=admin.id,
            )
            await ledger.dispense(
                [{"item_id": first[-1], "quantity": 1, "notes": "Weekly restock"}],
                "Housekeeping",
                created_by_user_id=admin.id,
            )
            print("[seed_demo_data] recorded 2 dispenses")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy async URL")
    parser.add_argument("--with-dispenses", action="store_true", help="Also record a couple of demo dispenses")
    args = parser.parse_args()

    asyncio.run(seed(args.database_url, with_dispenses=bool(args.with_dispenses)))
