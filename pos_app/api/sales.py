from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from pos_app.api.deps import get_ledger, get_store
from pos_app.schemas.invoice import CheckoutRequest, InvoiceOut
from pos_app.services import checkout_service
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store
from pos_app.time_utils import end_of_day, start_of_day

router = APIRouter(tags=["Sales"])


@router.post("/checkout", response_model=InvoiceOut, status_code=201)
def checkout(
    data: CheckoutRequest,
    store: Store = Depends(get_store),
    ledger: InventoryLedger = Depends(get_ledger),
):
    return checkout_service.checkout(store, ledger, data)


@router.get("/invoices", response_model=list[InvoiceOut])
def list_invoices(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    store: Store = Depends(get_store),
):
    return checkout_service.list_invoices(
        store,
        start=start_of_day(start_date) if start_date else None,
        end=end_of_day(end_date) if end_date else None,
    )


@router.get("/invoices/{invoice_id}", response_model=InvoiceOut)
def get_invoice(invoice_id: str, store: Store = Depends(get_store)):
    invoice = checkout_service.get_invoice(store, invoice_id)
    if not invoice:
        raise HTTPException(404, "Invoice not found")
    return invoice
