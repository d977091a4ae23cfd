"""Inventory ledger: the only path that changes Product.quantity outside of
full catalog edits.

Each adjustment is one read followed by one write of a single product. Two
adjustments of the same product that interleave between their read and
their write lose one of the updates; there is no locking or compare-and-swap.
The POS runs on a single terminal, so this is accepted rather than guarded
against.
"""

import logging
from typing import Callable

from pos_app.models.product import Product
from pos_app.services.store import Store
from pos_app.time_utils import utcnow

logger = logging.getLogger(__name__)


class InventoryLedger:
    def __init__(self, store: Store):
        self.store = store

    def _apply(self, product_id: str, compute: Callable[[int], int], clamp: bool = False) -> Product | None:
        product = self.store.get(Product, product_id)
        if not product:
            logger.warning("Quantity adjustment skipped: product %s no longer exists", product_id)
            return None
        new_quantity = int(compute(product.quantity))
        if clamp:
            new_quantity = max(0, new_quantity)
        product.quantity = new_quantity
        product.updated_at = utcnow()
        return self.store.replace(product)

    def adjust_quantity(self, product_id: str, new_quantity: int, *, clamp: bool = False) -> Product | None:
        """Overwrite a product's quantity and refresh updated_at.

        ``clamp`` floors the value at 0; only the sale path asks for it.
        A product that no longer exists is left alone and ``None`` returned.
        """
        return self._apply(product_id, lambda _current: new_quantity, clamp=clamp)

    def record_sale(self, product_id: str, sold_quantity: int) -> Product | None:
        return self._apply(product_id, lambda current: current - sold_quantity, clamp=True)

    def restock(self, product_id: str, quantity: int) -> Product | None:
        return self._apply(product_id, lambda current: current + quantity)

    def write_off(self, product_id: str, quantity: int) -> Product | None:
        # Damage reports floor at zero themselves; the clamp flag stays off
        return self._apply(product_id, lambda current: max(0, current - quantity))
