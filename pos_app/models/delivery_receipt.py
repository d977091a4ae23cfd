import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pos_app.database import Base
from pos_app.time_utils import utcnow


class DeliveryStatus(str, PyEnum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


class DeliveryReceipt(Base):
    __tablename__ = "delivery_receipts"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String, nullable=False)
    customer_phone: Mapped[str] = mapped_column(String, default="")
    delivery_address: Mapped[str] = mapped_column(Text, default="")
    delivery_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    delivered_by: Mapped[str] = mapped_column(String, default="")
    status: Mapped[str] = mapped_column(
        Enum(DeliveryStatus, values_callable=lambda x: [e.value for e in x]),
        default=DeliveryStatus.PENDING,
        index=True,
    )
    notes: Mapped[str] = mapped_column(Text, default="")
