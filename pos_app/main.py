import asyncio
import logging
import traceback
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pos_app.api import alerts, backup, damaged, deliveries, products, reports, returns, sales
from pos_app.config import Settings, settings as default_settings
from pos_app.database import Database
from pos_app.exceptions import (
    CommitFailed,
    DuplicateKeyError,
    NotFoundError,
    PartialCommitError,
    PartialImportError,
    StoreUnavailableError,
    WorkflowRejected,
)
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.product_service import ensure_default_categories
from pos_app.services.stock_alert_service import StockAlertMonitor
from pos_app.services.store import Store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database = Database(settings.DATABASE_URL, timeout=settings.DATABASE_TIMEOUT)
    database.open()

    store = Store(database)
    app.state.store = store
    app.state.ledger = InventoryLedger(store)
    app.state.monitor = StockAlertMonitor(store, low_stock_threshold=settings.LOW_STOCK_THRESHOLD)
    ensure_default_categories(store, settings.DEFAULT_CATEGORIES)

    scan_task = None
    if settings.STOCK_ALERT_INTERVAL_SECONDS > 0:
        scan_task = asyncio.create_task(app.state.monitor.run_periodically(settings.STOCK_ALERT_INTERVAL_SECONDS))
    try:
        yield
    finally:
        if scan_task:
            scan_task.cancel()
            with suppress(asyncio.CancelledError):
                await scan_task
        database.close()


def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc), **extra})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, exc)

    @app.exception_handler(DuplicateKeyError)
    async def duplicate_handler(request: Request, exc: DuplicateKeyError):
        return _error(409, exc)

    @app.exception_handler(WorkflowRejected)
    async def rejected_handler(request: Request, exc: WorkflowRejected):
        return _error(400, exc)

    @app.exception_handler(StoreUnavailableError)
    async def unavailable_handler(request: Request, exc: StoreUnavailableError):
        return _error(503, exc)

    @app.exception_handler(PartialCommitError)
    async def partial_commit_handler(request: Request, exc: PartialCommitError):
        return _error(500, exc, record_id=exc.record_id, adjusted=exc.adjusted, pending=exc.pending)

    @app.exception_handler(PartialImportError)
    async def partial_import_handler(request: Request, exc: PartialImportError):
        return _error(500, exc, restored=exc.restored)

    @app.exception_handler(CommitFailed)
    async def commit_failed_handler(request: Request, exc: CommitFailed):
        return _error(500, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Return JSON for unhandled exceptions so the UI can show the error."""
        logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
        return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Point of sale: catalog, checkout, returns, damage reports, stock alerts and backups",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    _register_exception_handlers(app)

    app.include_router(products.router, prefix="/api/v1")
    app.include_router(products.categories_router, prefix="/api/v1")
    app.include_router(sales.router, prefix="/api/v1")
    app.include_router(returns.router, prefix="/api/v1")
    app.include_router(damaged.router, prefix="/api/v1")
    app.include_router(deliveries.router, prefix="/api/v1")
    app.include_router(alerts.router, prefix="/api/v1")
    app.include_router(reports.router, prefix="/api/v1")
    app.include_router(backup.router, prefix="/api/v1")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
