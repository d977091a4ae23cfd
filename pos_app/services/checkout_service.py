import logging
from functools import partial

from pos_app.exceptions import WorkflowRejected
from pos_app.models.invoice import Invoice, InvoiceItem, PaymentMethod
from pos_app.models.product import Product
from pos_app.schemas.invoice import CheckoutRequest
from pos_app.services.cart import Cart, CartLine
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store
from pos_app.services.workflow import Workflow, WorkflowState

logger = logging.getLogger(__name__)


def build_invoice(
    lines: list[CartLine],
    snapshots: dict[str, dict],
    discount: float,
    payment_method: PaymentMethod,
    customer_name: str | None = None,
    customer_phone: str | None = None,
) -> Invoice:
    items = [
        InvoiceItem(
            position=position,
            product_id=line.product_id,
            product=snapshots[line.product_id],
            quantity=line.quantity,
            price=line.price,
            total=line.quantity * line.price,
        )
        for position, line in enumerate(lines)
    ]
    subtotal = sum(item.total for item in items)
    return Invoice(
        items=items,
        subtotal=subtotal,
        discount=discount,
        total=subtotal - discount,
        payment_method=payment_method,
        customer_name=customer_name or None,
        customer_phone=customer_phone or None,
    )


class CheckoutWorkflow(Workflow):
    """Cart -> invoice. The invoice is written first, then each line's stock
    is decremented (floored at zero).
    """

    name = "checkout"

    def __init__(self, store: Store, ledger: InventoryLedger):
        super().__init__(store, ledger)
        self.cart = Cart(store)

    def add(self, product_id: str, quantity: int = 1, price: float | None = None) -> CartLine:
        self._expect("add to cart", WorkflowState.SELECTING_TARGET, WorkflowState.ENTERING_DETAILS)
        line = self.cart.add(product_id, quantity, price)
        self.state = WorkflowState.ENTERING_DETAILS
        return line

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        self._expect("change quantity", WorkflowState.ENTERING_DETAILS)
        line = self.cart.set_quantity(product_id, quantity)
        if self.cart.is_empty():
            self.state = WorkflowState.SELECTING_TARGET
        return line

    def remove(self, product_id: str) -> None:
        self._expect("remove from cart", WorkflowState.ENTERING_DETAILS)
        self.cart.remove(product_id)
        if self.cart.is_empty():
            self.state = WorkflowState.SELECTING_TARGET

    def reset(self) -> None:
        self.cart.clear()
        super().reset()

    def _snapshots(self) -> dict[str, dict]:
        snapshots = {}
        for line in self.cart.lines:
            live = self.store.get(Product, line.product_id)
            snapshots[line.product_id] = (live or line.product).snapshot()
        return snapshots

    def submit(
        self,
        discount: float = 0.0,
        payment_method: PaymentMethod | str = PaymentMethod.CASH,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> Invoice:
        if self.cart.is_empty():
            raise WorkflowRejected("Cart is empty")
        self._expect("check out", WorkflowState.ENTERING_DETAILS)

        if discount < 0:
            raise WorkflowRejected("Discount cannot be negative")
        subtotal = self.cart.subtotal()
        if discount > subtotal:
            raise WorkflowRejected(f"Discount {discount} exceeds subtotal {subtotal}")
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise WorkflowRejected(f"Unknown payment method '{payment_method}'") from None

        lines = self.cart.lines
        invoice = build_invoice(lines, self._snapshots(), discount, method, customer_name, customer_phone)
        invoice = self._commit(
            lambda: self.store.add(invoice),
            [(line.product_id, partial(self.ledger.record_sale, line.product_id, line.quantity)) for line in lines],
        )
        self.cart.clear()
        logger.info(
            "Invoice %s committed: %d line(s), total %.2f (%s)",
            invoice.id, len(lines), invoice.total, method.value,
        )
        return invoice


def checkout(store: Store, ledger: InventoryLedger, data: CheckoutRequest) -> Invoice:
    """Run a whole sale from one request, adding lines as a cashier would."""
    workflow = CheckoutWorkflow(store, ledger)
    for item in data.items:
        workflow.add(item.product_id, item.quantity, item.price)
    return workflow.submit(
        discount=data.discount,
        payment_method=data.payment_method,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
    )


def get_invoice(store: Store, invoice_id: str) -> Invoice | None:
    return store.get(Invoice, invoice_id)


def list_invoices(store: Store, start=None, end=None) -> list[Invoice]:
    """Invoices newest first, optionally limited to created_at in [start, end]."""
    invoices = store.get_all(Invoice)
    if start:
        invoices = [i for i in invoices if i.created_at >= start]
    if end:
        invoices = [i for i in invoices if i.created_at <= end]
    return sorted(invoices, key=lambda i: i.created_at, reverse=True)
