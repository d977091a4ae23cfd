from datetime import datetime

from pydantic import BaseModel, Field

from pos_app.models.invoice import PaymentMethod


class CheckoutLine(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    price: float | None = Field(None, ge=0)  # None = product's sale price


class CheckoutRequest(BaseModel):
    items: list[CheckoutLine]
    discount: float = 0.0
    payment_method: PaymentMethod = PaymentMethod.CASH
    customer_name: str | None = None
    customer_phone: str | None = None


class InvoiceItemOut(BaseModel):
    product_id: str
    product: dict
    quantity: int
    price: float
    total: float

    model_config = {"from_attributes": True}


class InvoiceOut(BaseModel):
    id: str
    items: list[InvoiceItemOut]
    subtotal: float
    discount: float
    total: float
    payment_method: PaymentMethod
    customer_name: str | None = None
    customer_phone: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
