import json
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pos_app.database import Base
from pos_app.time_utils import utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    barcode: Mapped[str] = mapped_column(String, unique=True, index=True)
    purchase_price: Mapped[float] = mapped_column(Float, default=0.0)
    sale_price: Mapped[float] = mapped_column(Float, default=0.0)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    # Category name, not a foreign key
    category: Mapped[str] = mapped_column(String, default="", index=True)
    description: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def snapshot(self) -> dict:
        """Frozen copy of this product for embedding in other records."""
        return {
            "id": self.id,
            "name": self.name,
            "barcode": self.barcode,
            "purchase_price": self.purchase_price,
            "sale_price": self.sale_price,
            "quantity": self.quantity,
            "category": self.category,
            "description": self.description or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, default="")


class ProductSnapshotMixin:
    """Adds a ``product_snapshot`` JSON column holding a frozen Product copy."""

    product_snapshot: Mapped[str] = mapped_column(Text, default="{}")

    @property
    def product(self) -> dict:
        return json.loads(self.product_snapshot) if self.product_snapshot else {}

    @product.setter
    def product(self, value: dict) -> None:
        self.product_snapshot = json.dumps(value)
