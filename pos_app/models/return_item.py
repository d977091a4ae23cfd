import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pos_app.database import Base
from pos_app.models.damaged_product import ReviewStatus
from pos_app.models.product import ProductSnapshotMixin
from pos_app.time_utils import utcnow


class ReturnItem(ProductSnapshotMixin, Base):
    __tablename__ = "return_items"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    original_invoice_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, default="")
    return_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    refund_amount: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(
        Enum(ReviewStatus, values_callable=lambda x: [e.value for e in x]),
        default=ReviewStatus.PENDING,
        index=True,
    )
