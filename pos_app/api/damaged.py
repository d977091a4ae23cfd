from fastapi import APIRouter, Depends, HTTPException

from pos_app.api.deps import get_ledger, get_store
from pos_app.models.damaged_product import ReviewStatus
from pos_app.schemas.transaction import DamageCreate, DamageOut, ReviewStatusUpdate
from pos_app.services import damage_service
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store

router = APIRouter(prefix="/damaged-products", tags=["Damaged Products"])


@router.post("", response_model=DamageOut, status_code=201)
def report_damage(
    data: DamageCreate,
    store: Store = Depends(get_store),
    ledger: InventoryLedger = Depends(get_ledger),
):
    return damage_service.report_damage(store, ledger, data)


@router.get("", response_model=list[DamageOut])
def list_damaged(status: ReviewStatus | None = None, store: Store = Depends(get_store)):
    return damage_service.list_damaged(store, status=status)


@router.patch("/{damage_id}", response_model=DamageOut)
def update_damage_status(damage_id: str, data: ReviewStatusUpdate, store: Store = Depends(get_store)):
    record = damage_service.update_damage_status(store, damage_id, data.status)
    if not record:
        raise HTTPException(404, "Damage report not found")
    return record
