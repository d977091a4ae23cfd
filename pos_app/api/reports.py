from datetime import date

from fastapi import APIRouter, Depends, Query

from pos_app.api.deps import get_settings, get_store
from pos_app.config import Settings
from pos_app.services import report_service
from pos_app.services.store import Store

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/sales")
def sales_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    store: Store = Depends(get_store),
):
    return report_service.sales_summary(store, start_date=start_date, end_date=end_date)


@router.get("/top-products")
def top_products_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    limit: int = 10,
    store: Store = Depends(get_store),
):
    return report_service.top_products(store, start_date=start_date, end_date=end_date, limit=limit)


@router.get("/categories")
def category_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    store: Store = Depends(get_store),
):
    return report_service.category_sales(store, start_date=start_date, end_date=end_date)


@router.get("/daily")
def daily_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    store: Store = Depends(get_store),
):
    return report_service.daily_sales(store, start_date=start_date, end_date=end_date)


@router.get("/inventory")
def inventory_report(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    return report_service.inventory_summary(store, threshold=settings.LOW_STOCK_THRESHOLD)


@router.get("/low-stock")
def low_stock_report(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    return report_service.inventory_summary(store, threshold=settings.LOW_STOCK_THRESHOLD)["low_stock_items"]


@router.get("/dashboard")
def dashboard(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    return report_service.dashboard(store, threshold=settings.LOW_STOCK_THRESHOLD)


@router.get("/export")
def export_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return report_service.sales_report(
        store, start_date=start_date, end_date=end_date, threshold=settings.LOW_STOCK_THRESHOLD
    )
