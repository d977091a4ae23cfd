from fastapi import APIRouter, Depends, HTTPException

from pos_app.api.deps import get_ledger, get_store
from pos_app.schemas.transaction import ReturnCreate, ReturnOut, ReviewStatusUpdate
from pos_app.services import return_service
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store

router = APIRouter(prefix="/returns", tags=["Returns"])


@router.post("", response_model=ReturnOut, status_code=201)
def create_return(
    data: ReturnCreate,
    store: Store = Depends(get_store),
    ledger: InventoryLedger = Depends(get_ledger),
):
    return return_service.process_return(store, ledger, data)


@router.get("", response_model=list[ReturnOut])
def list_returns(invoice_id: str | None = None, store: Store = Depends(get_store)):
    return return_service.list_returns(store, invoice_id=invoice_id)


@router.patch("/{return_id}", response_model=ReturnOut)
def update_return_status(return_id: str, data: ReviewStatusUpdate, store: Store = Depends(get_store)):
    record = return_service.update_return_status(store, return_id, data.status)
    if not record:
        raise HTTPException(404, "Return not found")
    return record
