from dataclasses import dataclass

from pos_app.exceptions import WorkflowRejected
from pos_app.models.product import Product
from pos_app.services.store import Store


@dataclass
class CartLine:
    product_id: str
    product: Product
    quantity: int
    price: float

    @property
    def total(self) -> float:
        return self.quantity * self.price


class Cart:
    """Lines being assembled for a sale. Nothing here touches the database
    except reads: every add or quantity change re-reads the live product so
    the cart can never ask for more than is on the shelf.
    """

    def __init__(self, store: Store):
        self.store = store
        self._lines: dict[str, CartLine] = {}

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def _live_product(self, product_id: str) -> Product:
        product = self.store.get(Product, product_id)
        if not product:
            raise WorkflowRejected(f"Product {product_id} not found")
        return product

    def add(self, product_id: str, quantity: int = 1, price: float | None = None) -> CartLine:
        if quantity < 1:
            raise WorkflowRejected("Quantity must be at least 1")
        if price is not None and price < 0:
            raise WorkflowRejected("Price cannot be negative")

        product = self._live_product(product_id)
        if product.quantity <= 0:
            raise WorkflowRejected(f"{product.name} is out of stock")

        line = self._lines.get(product_id)
        if line and price is not None and price != line.price:
            raise WorkflowRejected(
                f"{product.name} is already in the cart at {line.price}; one line has one unit price"
            )
        requested = quantity + (line.quantity if line else 0)
        if requested > product.quantity:
            raise WorkflowRejected(
                f"Requested quantity {requested} of {product.name} exceeds stock ({product.quantity})"
            )

        if line:
            line.quantity = requested
            line.product = product
        else:
            line = CartLine(
                product_id=product.id,
                product=product,
                quantity=requested,
                price=product.sale_price if price is None else price,
            )
            self._lines[product_id] = line
        return line

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        """Change a line's quantity; zero or less removes it."""
        line = self._lines.get(product_id)
        if not line:
            raise WorkflowRejected(f"Product {product_id} is not in the cart")
        if quantity <= 0:
            self.remove(product_id)
            return None

        product = self._live_product(product_id)
        if quantity > product.quantity:
            raise WorkflowRejected(
                f"Requested quantity {quantity} of {product.name} exceeds stock ({product.quantity})"
            )
        line.quantity = quantity
        line.product = product
        return line

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def subtotal(self) -> float:
        return sum(line.total for line in self._lines.values())
