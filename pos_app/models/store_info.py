from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pos_app.database import Base

STORE_INFO_ID = "default"


class StoreInfo(Base):
    """Shop details printed on receipts; a single row."""

    __tablename__ = "store_info"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=STORE_INFO_ID)
    name: Mapped[str] = mapped_column(String, default="")
    name_en: Mapped[str] = mapped_column(String, default="")
    address: Mapped[str] = mapped_column(String, default="")
    phone: Mapped[str] = mapped_column(String, default="")
    email: Mapped[str] = mapped_column(String, default="")
    tax_number: Mapped[str] = mapped_column(String, default="")
    description: Mapped[str] = mapped_column(Text, default="")
