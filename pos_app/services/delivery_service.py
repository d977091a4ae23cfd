import logging

from pos_app.exceptions import WorkflowRejected
from pos_app.models.delivery_receipt import DeliveryReceipt, DeliveryStatus
from pos_app.models.invoice import Invoice
from pos_app.schemas.transaction import DeliveryCreate
from pos_app.services.store import Store
from pos_app.time_utils import parse_datetime, utcnow

logger = logging.getLogger(__name__)


def create_delivery(store: Store, data: DeliveryCreate) -> DeliveryReceipt:
    """Issue a delivery receipt for an invoice. Stock is not affected."""
    if not store.get(Invoice, data.invoice_id):
        raise WorkflowRejected(f"Invoice {data.invoice_id} not found")
    receipt = store.add(DeliveryReceipt(
        invoice_id=data.invoice_id,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
        delivery_address=data.delivery_address,
        delivery_date=parse_datetime(data.delivery_date) or utcnow(),
        delivered_by=data.delivered_by,
        status=DeliveryStatus.PENDING,
        notes=data.notes,
    ))
    logger.info("Delivery receipt %s issued for invoice %s", receipt.id, receipt.invoice_id)
    return receipt


def get_delivery(store: Store, receipt_id: str) -> DeliveryReceipt | None:
    return store.get(DeliveryReceipt, receipt_id)


def list_deliveries(
    store: Store, status: DeliveryStatus | None = None, invoice_id: str | None = None
) -> list[DeliveryReceipt]:
    if invoice_id:
        receipts = store.find_by_index(DeliveryReceipt, "invoice_id", invoice_id)
    else:
        receipts = store.get_all(DeliveryReceipt)
    if status:
        receipts = [r for r in receipts if r.status == status]
    return sorted(receipts, key=lambda r: r.delivery_date, reverse=True)


def update_delivery_status(store: Store, receipt_id: str, status: DeliveryStatus) -> DeliveryReceipt | None:
    receipt = store.get(DeliveryReceipt, receipt_id)
    if not receipt:
        return None
    receipt.status = status
    return store.replace(receipt)
