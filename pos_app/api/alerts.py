from fastapi import APIRouter, Depends, Response

from pos_app.api.deps import get_monitor
from pos_app.schemas.transaction import StockAlertOut
from pos_app.services.stock_alert_service import StockAlertMonitor

router = APIRouter(prefix="/alerts", tags=["Stock Alerts"])


@router.get("", response_model=list[StockAlertOut])
def list_alerts(include_acknowledged: bool = False, monitor: StockAlertMonitor = Depends(get_monitor)):
    return monitor.list_alerts(include_acknowledged=include_acknowledged)


@router.post("/scan", response_model=list[StockAlertOut])
def scan(monitor: StockAlertMonitor = Depends(get_monitor)):
    """Run one stock scan now; returns the alerts it created."""
    return monitor.scan()


@router.post(
    "/{alert_id}/acknowledge",
    response_model=StockAlertOut,
    responses={204: {"description": "No alert with that id; nothing changed"}},
)
def acknowledge(alert_id: str, monitor: StockAlertMonitor = Depends(get_monitor)):
    alert = monitor.acknowledge(alert_id)
    if not alert:
        return Response(status_code=204)
    return alert
