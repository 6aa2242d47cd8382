import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from db.store import InventoryStore
from routers.items import router as items_router
from routers.reports import router as reports_router
from routers.transactions import router as transactions_router
from services.ledger import StockLedger
from services.reports import InventoryReports

logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("inventory")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = InventoryStore(database_url or settings.database_url, echo=settings.database_echo)
        await store.init()
        app.state.store = store
        app.state.ledger = StockLedger(store)
        app.state.reports = InventoryReports(store)
        try:
            yield
        finally:
            await store.close()
            logger.info("Store closed")

    app = FastAPI(
        title="Storeroom Inventory API",
        description="API for tracking stock items, dispenses and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(items_router, prefix="/items", tags=["items"])
    app.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
    app.include_router(reports_router, prefix="/reports", tags=["reports"])
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
