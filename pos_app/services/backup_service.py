import logging

from pydantic import ValidationError

from pos_app.config import Settings
from pos_app.exceptions import PartialImportError, PosError, WorkflowRejected
from pos_app.models.damaged_product import DamagedProduct
from pos_app.models.delivery_receipt import DeliveryReceipt
from pos_app.models.invoice import Invoice, InvoiceItem
from pos_app.models.product import Category, Product
from pos_app.models.return_item import ReturnItem
from pos_app.models.stock_alert import StockAlert
from pos_app.models.store_info import STORE_INFO_ID, StoreInfo
from pos_app.schemas.backup import (
    BACKUP_VERSION,
    BackupDocument,
    CategoryRecord,
    ImportResult,
    InvoiceRecord,
    ProductRecord,
    StoreInfoData,
    StoreInfoRecord,
)
from pos_app.services.store import Store
from pos_app.time_utils import parse_datetime, utcnow

logger = logging.getLogger(__name__)

# Every collection; an import leaves nothing from the previous database
CLEARED_ON_IMPORT = (
    ReturnItem,
    DamagedProduct,
    DeliveryReceipt,
    StockAlert,
    Invoice,
    Product,
    Category,
    StoreInfo,
)


# --- Store info ---

def get_store_info(store: Store, settings: Settings) -> StoreInfo:
    info = store.get(StoreInfo, STORE_INFO_ID)
    if info:
        return info
    return StoreInfo(
        id=STORE_INFO_ID,
        name=settings.STORE_NAME,
        name_en=settings.STORE_NAME_EN,
        address=settings.STORE_ADDRESS,
        phone=settings.STORE_PHONE,
        email=settings.STORE_EMAIL,
        tax_number="",
        description="",
    )


def save_store_info(store: Store, data: StoreInfoData) -> StoreInfo:
    return store.replace(StoreInfo(id=STORE_INFO_ID, **data.model_dump()))


# --- Export / import ---

def export_backup(store: Store, settings: Settings) -> dict:
    """Products, invoices, categories and store info as one JSON document."""
    document = BackupDocument(
        timestamp=utcnow(),
        store_info=StoreInfoRecord.model_validate(get_store_info(store, settings)),
        products=[ProductRecord.model_validate(p) for p in store.get_all(Product)],
        invoices=[
            InvoiceRecord.model_validate(i)
            for i in sorted(store.get_all(Invoice), key=lambda i: i.created_at)
        ],
        categories=[CategoryRecord.model_validate(c) for c in store.get_all(Category)],
        version=BACKUP_VERSION,
    )
    return document.model_dump(mode="json", by_alias=True)


def _product_from_record(record: ProductRecord) -> Product:
    now = utcnow()
    return Product(
        id=record.id,
        name=record.name,
        barcode=record.barcode,
        purchase_price=record.purchase_price,
        sale_price=record.sale_price,
        quantity=record.quantity,
        category=record.category,
        description=record.description or "",
        created_at=parse_datetime(record.created_at) or now,
        updated_at=parse_datetime(record.updated_at) or now,
    )


def _invoice_from_record(record: InvoiceRecord) -> Invoice:
    return Invoice(
        id=record.id,
        items=[
            InvoiceItem(
                position=position,
                product_id=item.product_id,
                product=item.product.model_dump(mode="json"),
                quantity=item.quantity,
                price=item.price,
                total=item.total,
            )
            for position, item in enumerate(record.items)
        ],
        subtotal=record.subtotal,
        discount=record.discount,
        total=record.total,
        payment_method=record.payment_method,
        customer_name=record.customer_name,
        customer_phone=record.customer_phone,
        created_at=parse_datetime(record.created_at),
    )


def _check_unique(label: str, values: list[str]) -> None:
    seen = set()
    for value in values:
        if value in seen:
            raise WorkflowRejected(f"Backup contains duplicate {label} '{value}'")
        seen.add(value)


def import_backup(store: Store, document: dict) -> ImportResult:
    """Replace the whole database with the document's contents.

    This is a full replace, not a merge: every collection is cleared first,
    including returns, damage reports, deliveries, alerts and store info. The
    document is validated before anything is deleted. If re-adding fails
    after the clear, ``PartialImportError`` reports what was restored.
    """
    try:
        backup = BackupDocument.model_validate(document)
    except ValidationError as e:
        logger.warning("Rejected backup import: %s", e)
        raise WorkflowRejected(f"Invalid backup document: {e}") from e

    _check_unique("product id", [p.id for p in backup.products])
    _check_unique("barcode", [p.barcode for p in backup.products])
    _check_unique("invoice id", [i.id for i in backup.invoices])
    _check_unique("category id", [c.id for c in backup.categories])
    _check_unique("category name", [c.name for c in backup.categories])

    for kind in CLEARED_ON_IMPORT:
        store.clear(kind)

    restored = {"products": 0, "invoices": 0, "categories": 0}
    try:
        for record in backup.products:
            store.add(_product_from_record(record))
            restored["products"] += 1
        for record in backup.invoices:
            store.add(_invoice_from_record(record))
            restored["invoices"] += 1
        for record in backup.categories:
            store.add(Category(id=record.id, name=record.name, description=record.description or ""))
            restored["categories"] += 1
        if backup.store_info:
            save_store_info(store, StoreInfoData(**backup.store_info.model_dump()))
    except PosError as e:
        logger.error(
            "Backup import failed after clearing existing data (restored=%s)", restored, exc_info=True,
        )
        raise PartialImportError(f"Backup import stopped part way: {e}", restored=restored) from e

    logger.info(
        "Imported backup: %d products, %d invoices, %d categories",
        len(backup.products), len(backup.invoices), len(backup.categories),
    )
    return ImportResult(
        products=len(backup.products),
        invoices=len(backup.invoices),
        categories=len(backup.categories),
        store_info=backup.store_info is not None,
    )
