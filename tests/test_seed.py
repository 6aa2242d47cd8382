"""Demo seeding script."""

from scripts.seed_demo_data import DEMO_ITEMS, seed


def _url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}"


async def test_seed_with_dispenses(store, ledger, tmp_path):
    await seed(_url(tmp_path), with_dispenses=True)

    assert sorted(it.name for it in await ledger.list_items()) == sorted(f["name"] for f in DEMO_ITEMS)
    assert sorted(tx.department for tx in await ledger.list_transactions()) == ["Housekeeping", "Kitchen"]


async def test_reseed_with_one_new_item(store, ledger, tmp_path):
    for fields in DEMO_ITEMS[:-1]:
        await ledger.add_item(fields)

    await seed(_url(tmp_path), with_dispenses=True)

    items = {it.name: it for it in await ledger.list_items()}
    last = DEMO_ITEMS[-1]
    assert items[last["name"]].quantity == last["quantity"] - 2
    assert len(await ledger.list_transactions()) == 2
