from fastapi import Request

from db.store import InventoryStore
from services.ledger import StockLedger
from services.reports import InventoryReports


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def get_ledger(request: Request) -> StockLedger:
    # One ledger per app: its lock must be shared by every request.
    return request.app.state.ledger


def get_reports(request: Request) -> InventoryReports:
    return request.app.state.reports
