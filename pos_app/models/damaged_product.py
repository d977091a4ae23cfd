import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pos_app.database import Base
from pos_app.models.product import ProductSnapshotMixin
from pos_app.time_utils import utcnow


class ReviewStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DamagedProduct(ProductSnapshotMixin, Base):
    __tablename__ = "damaged_products"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, default="")
    reported_by: Mapped[str] = mapped_column(String, default="")
    reported_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    status: Mapped[str] = mapped_column(
        Enum(ReviewStatus, values_callable=lambda x: [e.value for e in x]),
        default=ReviewStatus.PENDING,
        index=True,
    )
