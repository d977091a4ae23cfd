import logging
from functools import partial

from pos_app.exceptions import WorkflowRejected
from pos_app.models.damaged_product import ReviewStatus
from pos_app.models.invoice import Invoice, InvoiceItem
from pos_app.models.return_item import ReturnItem
from pos_app.schemas.transaction import ReturnCreate
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store
from pos_app.services.workflow import Workflow, WorkflowState

logger = logging.getLogger(__name__)


class ReturnWorkflow(Workflow):
    """Take back part of an invoice line: record the return, then put the
    units back on the shelf.
    """

    name = "return"

    def __init__(self, store: Store, ledger: InventoryLedger):
        super().__init__(store, ledger)
        self.invoice: Invoice | None = None
        self.item: InvoiceItem | None = None

    def select_invoice(self, invoice_id: str) -> Invoice:
        self._expect("select an invoice", WorkflowState.SELECTING_TARGET, WorkflowState.ENTERING_DETAILS)
        invoice = self.store.get(Invoice, invoice_id)
        if not invoice:
            raise WorkflowRejected(f"Invoice {invoice_id} not found")
        self.invoice = invoice
        self.item = None
        self.state = WorkflowState.SELECTING_TARGET
        return invoice

    def select_item(self, product_id: str) -> InvoiceItem:
        if self.invoice is None:
            raise WorkflowRejected("Select an invoice first")
        self._expect("select an item", WorkflowState.SELECTING_TARGET, WorkflowState.ENTERING_DETAILS)
        item = next((i for i in self.invoice.items if i.product_id == product_id), None)
        if item is None:
            raise WorkflowRejected(f"Product {product_id} is not on invoice {self.invoice.id}")
        self.item = item
        self.state = WorkflowState.ENTERING_DETAILS
        return item

    def default_refund(self, quantity: int) -> float:
        if self.item is None:
            raise WorkflowRejected("Select an item first")
        return quantity * self.item.price

    def submit(self, quantity: int, reason: str, refund_amount: float | None = None) -> ReturnItem:
        self._expect("submit a return", WorkflowState.ENTERING_DETAILS)
        item = self.item
        if quantity < 1 or quantity > item.quantity:
            raise WorkflowRejected(f"Return quantity must be between 1 and {item.quantity}")
        if not reason or not reason.strip():
            raise WorkflowRejected("A reason is required")
        if refund_amount is None:
            refund_amount = self.default_refund(quantity)
        elif refund_amount < 0:
            raise WorkflowRejected("Refund amount cannot be negative")

        record = ReturnItem(
            original_invoice_id=self.invoice.id,
            product_id=item.product_id,
            product=item.product,
            quantity=quantity,
            reason=reason.strip(),
            refund_amount=refund_amount,
            status=ReviewStatus.PENDING,
        )
        record = self._commit(
            lambda: self.store.add(record),
            [(item.product_id, partial(self.ledger.restock, item.product_id, quantity))],
        )
        logger.info(
            "Return %s committed: %d x %s from invoice %s, refund %.2f",
            record.id, quantity, item.product_id, self.invoice.id, refund_amount,
        )
        return record


def process_return(store: Store, ledger: InventoryLedger, data: ReturnCreate) -> ReturnItem:
    workflow = ReturnWorkflow(store, ledger)
    workflow.select_invoice(data.invoice_id)
    workflow.select_item(data.product_id)
    return workflow.submit(data.quantity, data.reason, data.refund_amount)


def list_returns(store: Store, invoice_id: str | None = None) -> list[ReturnItem]:
    if invoice_id:
        returns = store.find_by_index(ReturnItem, "original_invoice_id", invoice_id)
    else:
        returns = store.get_all(ReturnItem)
    return sorted(returns, key=lambda r: r.return_date, reverse=True)


def update_return_status(store: Store, return_id: str, status: ReviewStatus) -> ReturnItem | None:
    """Direct status edit for external review; stock is not touched."""
    record = store.get(ReturnItem, return_id)
    if not record:
        return None
    record.status = status
    return store.replace(record)
