from datetime import datetime

from pydantic import BaseModel, Field

from pos_app.models.damaged_product import ReviewStatus
from pos_app.models.delivery_receipt import DeliveryStatus
from pos_app.models.stock_alert import AlertType


# --- Returns ---

class ReturnCreate(BaseModel):
    invoice_id: str
    product_id: str
    quantity: int
    reason: str
    refund_amount: float | None = None  # None = quantity x line price


class ReturnOut(BaseModel):
    id: str
    original_invoice_id: str
    product_id: str
    product: dict
    quantity: int
    reason: str
    return_date: datetime
    refund_amount: float
    status: ReviewStatus

    model_config = {"from_attributes": True}


# --- Damaged products ---

class DamageCreate(BaseModel):
    product_id: str
    quantity: int
    reason: str
    reported_by: str


class DamageOut(BaseModel):
    id: str
    product_id: str
    product: dict
    quantity: int
    reason: str
    reported_by: str
    reported_at: datetime
    status: ReviewStatus

    model_config = {"from_attributes": True}


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


# --- Delivery receipts ---

class DeliveryCreate(BaseModel):
    invoice_id: str
    customer_name: str = Field(min_length=1)
    customer_phone: str = ""
    delivery_address: str = ""
    delivered_by: str = ""
    delivery_date: datetime | None = None  # None = now
    notes: str = ""


class DeliveryStatusUpdate(BaseModel):
    status: DeliveryStatus


class DeliveryOut(BaseModel):
    id: str
    invoice_id: str
    customer_name: str
    customer_phone: str
    delivery_address: str
    delivery_date: datetime
    delivered_by: str
    status: DeliveryStatus
    notes: str = ""

    model_config = {"from_attributes": True}


# --- Stock alerts ---

class StockAlertOut(BaseModel):
    id: str
    product_id: str
    product: dict
    alert_type: AlertType
    threshold: int
    current_quantity: int
    created_at: datetime
    acknowledged: bool

    model_config = {"from_attributes": True}
