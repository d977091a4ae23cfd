import asyncio
import logging

from pos_app.models.product import Product
from pos_app.models.stock_alert import AlertType, StockAlert
from pos_app.services.store import Store

logger = logging.getLogger(__name__)

OUT_OF_STOCK_THRESHOLD = 0


class StockAlertMonitor:
    """Raises one open alert per product whose stock is at or below the
    low-stock threshold.

    A product with any unacknowledged alert gets no new one until that alert
    is acknowledged. Two scans running at the same time can both miss each
    other's alert and create a duplicate.
    """

    def __init__(self, store: Store, low_stock_threshold: int = 5):
        self.store = store
        self.low_stock_threshold = low_stock_threshold

    def classify(self, quantity: int) -> tuple[AlertType, int] | None:
        if quantity <= OUT_OF_STOCK_THRESHOLD:
            return AlertType.OUT_OF_STOCK, OUT_OF_STOCK_THRESHOLD
        if quantity <= self.low_stock_threshold:
            return AlertType.LOW_STOCK, self.low_stock_threshold
        return None

    def scan(self) -> list[StockAlert]:
        products = self.store.get_all(Product)
        open_for = {a.product_id for a in self.store.find_by_index(StockAlert, "acknowledged", False)}

        created = []
        for product in products:
            tier = self.classify(product.quantity)
            if tier is None or product.id in open_for:
                continue
            alert_type, threshold = tier
            alert = self.store.add(StockAlert(
                product_id=product.id,
                product=product.snapshot(),
                alert_type=alert_type,
                threshold=threshold,
                current_quantity=product.quantity,
                acknowledged=False,
            ))
            open_for.add(product.id)
            created.append(alert)
            logger.info("Stock alert %s: %s (%s) at %d", alert.id, product.name, alert_type.value, product.quantity)
        return created

    def acknowledge(self, alert_id: str) -> StockAlert | None:
        alert = self.store.get(StockAlert, alert_id)
        if not alert:
            return None
        alert.acknowledged = True
        return self.store.replace(alert)

    def list_alerts(self, include_acknowledged: bool = False) -> list[StockAlert]:
        if include_acknowledged:
            alerts = self.store.get_all(StockAlert)
        else:
            alerts = self.store.find_by_index(StockAlert, "acknowledged", False)
        return sorted(alerts, key=lambda a: a.created_at, reverse=True)

    async def run_periodically(self, interval: float) -> None:
        """Scan every ``interval`` seconds until cancelled."""
        while True:
            try:
                await asyncio.to_thread(self.scan)
            except Exception:
                logger.exception("Stock alert scan failed")
            await asyncio.sleep(interval)
