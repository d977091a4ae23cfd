from fastapi import APIRouter, Depends, HTTPException

from pos_app.api.deps import get_store
from pos_app.models.delivery_receipt import DeliveryStatus
from pos_app.schemas.transaction import DeliveryCreate, DeliveryOut, DeliveryStatusUpdate
from pos_app.services import delivery_service
from pos_app.services.store import Store

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])


@router.post("", response_model=DeliveryOut, status_code=201)
def create_delivery(data: DeliveryCreate, store: Store = Depends(get_store)):
    return delivery_service.create_delivery(store, data)


@router.get("", response_model=list[DeliveryOut])
def list_deliveries(
    status: DeliveryStatus | None = None,
    invoice_id: str | None = None,
    store: Store = Depends(get_store),
):
    return delivery_service.list_deliveries(store, status=status, invoice_id=invoice_id)


@router.get("/{receipt_id}", response_model=DeliveryOut)
def get_delivery(receipt_id: str, store: Store = Depends(get_store)):
    receipt = delivery_service.get_delivery(store, receipt_id)
    if not receipt:
        raise HTTPException(404, "Delivery receipt not found")
    return receipt


@router.patch("/{receipt_id}", response_model=DeliveryOut)
def update_delivery_status(receipt_id: str, data: DeliveryStatusUpdate, store: Store = Depends(get_store)):
    receipt = delivery_service.update_delivery_status(store, receipt_id, data.status)
    if not receipt:
        raise HTTPException(404, "Delivery receipt not found")
    return receipt
