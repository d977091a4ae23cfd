from datetime import datetime

from pydantic import BaseModel, Field


# --- Category schemas ---

class CategoryCreate(BaseModel):
    id: str | None = None
    name: str = Field(min_length=1)
    description: str = ""


class CategoryOut(BaseModel):
    id: str
    name: str
    description: str = ""

    model_config = {"from_attributes": True}


# --- Product schemas ---

class ProductCreate(BaseModel):
    id: str | None = None  # None = generate
    name: str = Field(min_length=1)
    barcode: str = Field(min_length=1)
    purchase_price: float = Field(0.0, ge=0)
    sale_price: float = Field(0.0, ge=0)
    quantity: int = Field(0, ge=0)
    category: str = ""
    description: str = ""


class ProductUpdate(BaseModel):
    name: str | None = None
    barcode: str | None = None
    purchase_price: float | None = Field(None, ge=0)
    sale_price: float | None = Field(None, ge=0)
    quantity: int | None = Field(None, ge=0)
    category: str | None = None
    description: str | None = None


class ProductOut(BaseModel):
    id: str
    name: str
    barcode: str
    purchase_price: float
    sale_price: float
    quantity: int
    category: str
    description: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GeneratedBarcode(BaseModel):
    barcode: str
    formatted: str
    kind: str
