import logging
from functools import partial

from pos_app.exceptions import WorkflowRejected
from pos_app.models.damaged_product import DamagedProduct, ReviewStatus
from pos_app.models.product import Product
from pos_app.schemas.transaction import DamageCreate
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store
from pos_app.services.workflow import Workflow, WorkflowState

logger = logging.getLogger(__name__)


class DamageWorkflow(Workflow):
    name = "damage report"

    def __init__(self, store: Store, ledger: InventoryLedger):
        super().__init__(store, ledger)
        self.product: Product | None = None

    def _live_product(self, product_id: str) -> Product:
        product = self.store.get(Product, product_id)
        if not product:
            raise WorkflowRejected(f"Product {product_id} not found")
        return product

    def select_product(self, product_id: str) -> Product:
        self._expect("select a product", WorkflowState.SELECTING_TARGET, WorkflowState.ENTERING_DETAILS)
        self.product = self._live_product(product_id)
        self.state = WorkflowState.ENTERING_DETAILS
        return self.product

    def submit(self, quantity: int, reason: str, reported_by: str) -> DamagedProduct:
        self._expect("submit a damage report", WorkflowState.ENTERING_DETAILS)
        product = self._live_product(self.product.id)
        if quantity < 1 or quantity > product.quantity:
            raise WorkflowRejected(f"Damaged quantity must be between 1 and {product.quantity}")
        if not reason or not reason.strip():
            raise WorkflowRejected("A reason is required")
        if not reported_by or not reported_by.strip():
            raise WorkflowRejected("Reporter name is required")

        record = DamagedProduct(
            product_id=product.id,
            product=product.snapshot(),
            quantity=quantity,
            reason=reason.strip(),
            reported_by=reported_by.strip(),
            status=ReviewStatus.PENDING,
        )
        record = self._commit(
            lambda: self.store.add(record),
            [(product.id, partial(self.ledger.write_off, product.id, quantity))],
        )
        logger.info("Damage report %s committed: %d x %s", record.id, quantity, product.id)
        return record


def report_damage(store: Store, ledger: InventoryLedger, data: DamageCreate) -> DamagedProduct:
    workflow = DamageWorkflow(store, ledger)
    workflow.select_product(data.product_id)
    return workflow.submit(data.quantity, data.reason, data.reported_by)


def list_damaged(store: Store, status: ReviewStatus | None = None) -> list[DamagedProduct]:
    if status:
        records = store.find_by_index(DamagedProduct, "status", status)
    else:
        records = store.get_all(DamagedProduct)
    return sorted(records, key=lambda d: d.reported_at, reverse=True)


def update_damage_status(store: Store, damage_id: str, status: ReviewStatus) -> DamagedProduct | None:
    """Direct status edit for external review; stock is not touched."""
    record = store.get(DamagedProduct, damage_id)
    if not record:
        return None
    record.status = status
    return store.replace(record)
