import logging
from enum import Enum as PyEnum
from typing import Callable

from pos_app.exceptions import CommitFailed, PartialCommitError, PosError, WorkflowRejected
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.store import Store

logger = logging.getLogger(__name__)


class WorkflowState(str, PyEnum):
    SELECTING_TARGET = "selecting_target"
    ENTERING_DETAILS = "entering_details"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    FAILED = "failed"


class Workflow:
    """Shared shape of the stock-affecting workflows.

    A workflow writes its record first and then adjusts inventory, one
    product at a time. The two steps are separate commits: if an adjustment
    fails, the record stays and ``PartialCommitError`` says which products
    were and were not adjusted.
    """

    name = "workflow"

    def __init__(self, store: Store, ledger: InventoryLedger):
        self.store = store
        self.ledger = ledger
        self.state = WorkflowState.SELECTING_TARGET

    def _expect(self, action: str, *states: WorkflowState) -> None:
        if self.state not in states:
            raise WorkflowRejected(f"Cannot {action} while {self.name} is {self.state.value}")

    def reset(self) -> None:
        self.state = WorkflowState.SELECTING_TARGET

    def _commit(self, write_record: Callable, adjustments: list[tuple[str, Callable]]):
        self.state = WorkflowState.SUBMITTING
        try:
            record = write_record()
        except PosError as e:
            self.state = WorkflowState.FAILED
            logger.warning("%s commit failed, nothing written: %s", self.name, e)
            raise CommitFailed(f"{self.name} could not be saved: {e}") from e

        adjusted: list[str] = []
        for product_id, adjust in adjustments:
            try:
                adjust()
            except PosError as e:
                self.state = WorkflowState.FAILED
                pending = [pid for pid, _ in adjustments if pid not in adjusted]
                logger.error(
                    "%s %s saved but stock adjustment failed for %s (adjusted=%s, pending=%s)",
                    self.name, record.id, product_id, adjusted, pending, exc_info=True,
                )
                raise PartialCommitError(
                    f"{self.name} {record.id} was saved but stock could not be updated for product {product_id}",
                    record_id=record.id,
                    adjusted=adjusted,
                    pending=pending,
                ) from e
            adjusted.append(product_id)

        self.state = WorkflowState.COMMITTED
        return record
