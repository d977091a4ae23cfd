"""Full-database backup document.

Keys are camelCase so backups written by the browser version of the shop
(``{timestamp, storeInfo, products, invoices, categories, version}``) load
unchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pos_app.models.invoice import PaymentMethod

BACKUP_VERSION = "1.0.0"


class BackupModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProductRecord(BackupModel):
    id: str
    name: str
    barcode: str
    purchase_price: float = 0.0
    sale_price: float = 0.0
    quantity: int = 0
    category: str = ""
    description: str | None = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InvoiceItemRecord(BackupModel):
    product_id: str
    product: ProductRecord
    quantity: int
    price: float
    total: float


class InvoiceRecord(BackupModel):
    id: str
    items: list[InvoiceItemRecord]
    subtotal: float
    discount: float = 0.0
    total: float
    payment_method: PaymentMethod = PaymentMethod.CASH
    customer_name: str | None = None
    customer_phone: str | None = None
    created_at: datetime


class CategoryRecord(BackupModel):
    id: str
    name: str
    description: str | None = ""


class StoreInfoData(BaseModel):
    name: str = ""
    name_en: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_number: str = ""
    description: str = ""

    model_config = {"from_attributes": True}


class StoreInfoRecord(BackupModel):
    name: str = ""
    name_en: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_number: str = ""
    description: str = ""


class BackupDocument(BackupModel):
    timestamp: datetime | None = None
    store_info: StoreInfoRecord | None = None
    products: list[ProductRecord] = []
    invoices: list[InvoiceRecord] = []
    categories: list[CategoryRecord] = []
    version: str = BACKUP_VERSION


class ImportResult(BaseModel):
    products: int
    invoices: int
    categories: int
    store_info: bool
