from fastapi import APIRouter, Depends, HTTPException

from pos_app.api.deps import get_settings, get_store
from pos_app.config import Settings
from pos_app.schemas.product import (
    CategoryCreate,
    CategoryOut,
    GeneratedBarcode,
    ProductCreate,
    ProductOut,
    ProductUpdate,
)
from pos_app.services import barcode_service, product_service
from pos_app.services.store import Store

router = APIRouter(prefix="/products", tags=["Products"])
categories_router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, store: Store = Depends(get_store)):
    return product_service.create_product(store, data)


@router.get("", response_model=list[ProductOut])
def list_products(
    skip: int = 0,
    limit: int = 100,
    category: str | None = None,
    search: str | None = None,
    store: Store = Depends(get_store),
):
    return product_service.list_products(store, skip=skip, limit=limit, category=category, search=search)


@router.get("/low-stock", response_model=list[ProductOut])
def low_stock(
    threshold: int | None = None,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return product_service.get_low_stock(store, settings.LOW_STOCK_THRESHOLD if threshold is None else threshold)


@router.get("/generate-barcode", response_model=GeneratedBarcode)
def generate_barcode(kind: str = "EAN13", store: Store = Depends(get_store)):
    kind = kind.upper()
    try:
        code = barcode_service.generate_unique_barcode(store, kind)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return GeneratedBarcode(barcode=code, formatted=barcode_service.format_barcode(code, kind), kind=kind)


@router.get("/barcode/{barcode}", response_model=ProductOut)
def get_by_barcode(barcode: str, store: Store = Depends(get_store)):
    product = barcode_service.lookup_barcode(store, barcode)
    if not product:
        raise HTTPException(404, f"No product with barcode {barcode}")
    return product


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, store: Store = Depends(get_store)):
    product = product_service.get_product(store, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: str, data: ProductUpdate, store: Store = Depends(get_store)):
    product = product_service.update_product(store, product_id, data)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, store: Store = Depends(get_store)):
    if not product_service.delete_product(store, product_id):
        raise HTTPException(404, "Product not found")


# --- Categories ---

@categories_router.get("", response_model=list[CategoryOut])
def list_categories(store: Store = Depends(get_store)):
    return product_service.list_categories(store)


@categories_router.post("", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryCreate, store: Store = Depends(get_store)):
    return product_service.create_category(store, data)
