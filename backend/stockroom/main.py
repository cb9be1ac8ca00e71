import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom.api.health import router as health_router
from stockroom.api.routes_catalogue import router as catalogue_router
from stockroom.api.routes_inventory import router as inventory_router
from stockroom.config import settings
from stockroom.db import init_db
from stockroom.errors import StockroomError
from stockroom.repositories import SqlStore, build_repository
from stockroom.seed import seed_demo_products
from stockroom.services.inventory_service import InventoryService
from stockroom.utils.logconfig import configure_logging

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    configure_logging(settings.LOG_LEVEL)
    repo = build_repository(settings)
    if isinstance(repo, SqlStore):
        init_db()
    app.state.repository = repo

    if settings.SEED_DEMO_DATA:
        seed_demo_products(repo)

    # scheduler for low-stock alerts
    scheduler = BackgroundScheduler()

    def low_stock_job():
        try:
            InventoryService(repo).check_low_stock()
        except StockroomError as e:
            log.error("low stock check failed: %s", e)

    if settings.LOW_STOCK_CHECK_SECONDS > 0:
        scheduler.add_job(
            low_stock_job,
            "interval",
            seconds=settings.LOW_STOCK_CHECK_SECONDS,
            id="low_stock_check",
        )
        scheduler.start()

    try:
        yield
    finally:
        if scheduler.running:
            scheduler.shutdown(wait=False)


app = FastAPI(title="Restaurant Stockroom", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router, prefix="/api/products", tags=["catalogue"])

app.include_router(inventory_router, tags=["inventory"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stockroom.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
