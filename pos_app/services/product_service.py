import logging

from pos_app.exceptions import DuplicateKeyError
from pos_app.models.product import Category, Product
from pos_app.schemas.product import CategoryCreate, ProductCreate, ProductUpdate
from pos_app.services.store import Store
from pos_app.time_utils import utcnow

logger = logging.getLogger(__name__)


def create_product(store: Store, data: ProductCreate) -> Product:
    existing = store.get_by_index(Product, "barcode", data.barcode)
    if existing:
        raise DuplicateKeyError(f"Barcode {data.barcode} is already used by product {existing.id}")
    now = utcnow()
    product = Product(
        name=data.name,
        barcode=data.barcode,
        purchase_price=data.purchase_price,
        sale_price=data.sale_price,
        quantity=data.quantity,
        category=data.category,
        description=data.description,
        created_at=now,
        updated_at=now,
    )
    if data.id:
        product.id = data.id
    product = store.add(product)
    logger.info("Created product %s (%s)", product.id, product.barcode)
    return product


def get_product(store: Store, product_id: str) -> Product | None:
    return store.get(Product, product_id)


def get_product_by_barcode(store: Store, barcode: str) -> Product | None:
    return store.get_by_index(Product, "barcode", barcode)


def list_products(
    store: Store,
    skip: int = 0,
    limit: int = 100,
    category: str | None = None,
    search: str | None = None,
) -> list[Product]:
    if category:
        products = store.find_by_index(Product, "category", category)
    else:
        products = store.get_all(Product)
    if search:
        term = search.lower()
        products = [p for p in products if term in p.name.lower() or search in p.barcode]
    products.sort(key=lambda p: p.name.lower())
    return products[skip:skip + limit]


def update_product(store: Store, product_id: str, data: ProductUpdate) -> Product | None:
    """Full-record catalog edit. Historical snapshots are not affected."""
    product = store.get(Product, product_id)
    if not product:
        return None
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if "barcode" in update_data and update_data["barcode"] != product.barcode:
        owner = store.get_by_index(Product, "barcode", update_data["barcode"])
        if owner and owner.id != product.id:
            raise DuplicateKeyError(f"Barcode {update_data['barcode']} is already used by product {owner.id}")
    for field, value in update_data.items():
        setattr(product, field, value)
    product.updated_at = utcnow()
    return store.replace(product)


def delete_product(store: Store, product_id: str) -> bool:
    return store.delete(Product, product_id)


def get_low_stock(store: Store, threshold: int = 5) -> list[Product]:
    return sorted(
        (p for p in store.get_all(Product) if p.quantity <= threshold),
        key=lambda p: p.quantity,
    )


# --- Categories ---

def create_category(store: Store, data: CategoryCreate) -> Category:
    category = Category(name=data.name.strip(), description=data.description)
    if data.id:
        category.id = data.id
    return store.add(category)


def list_categories(store: Store) -> list[Category]:
    return sorted(store.get_all(Category), key=lambda c: c.name)


def ensure_default_categories(store: Store, names: list[str]) -> list[Category]:
    """Seed the catalog's categories when none exist yet."""
    if store.get_all(Category):
        return []
    created = [store.add(Category(name=name)) for name in names]
    if created:
        logger.info("Seeded %d default categories", len(created))
    return created
