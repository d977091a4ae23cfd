from fastapi import Request

from pos_app.config import Settings
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.stock_alert_service import StockAlertMonitor
from pos_app.services.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_ledger(request: Request) -> InventoryLedger:
    return request.app.state.ledger


def get_monitor(request: Request) -> StockAlertMonitor:
    return request.app.state.monitor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
