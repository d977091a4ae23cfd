"""
Pytest fixtures for POS tests.

Every test gets its own SQLite file under tmp_path, so nothing leaks
between tests.
"""

import itertools

import pytest
from fastapi.testclient import TestClient

from pos_app.config import Settings
from pos_app.database import Database
from pos_app.main import create_app
from pos_app.schemas.product import ProductCreate
from pos_app.services.inventory_service import InventoryLedger
from pos_app.services.product_service import create_product
from pos_app.services.store import Store


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'pos.db'}")
    db.open()
    yield db
    db.close()


@pytest.fixture
def store(database):
    return Store(database)


@pytest.fixture
def ledger(store):
    return InventoryLedger(store)


@pytest.fixture
def make_product(store):
    """Factory for catalog products with unique barcodes."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Product {n}",
            "barcode": f"2000000{n:05d}",
            "purchase_price": 5.0,
            "sale_price": 10.0,
            "quantity": 10,
            "category": "Cables",
        }
        data.update(overrides)
        return create_product(store, ProductCreate(**data))

    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}",
        STOCK_ALERT_INTERVAL_SECONDS=0,
        DEFAULT_CATEGORIES=["Cables", "Chargers"],
        STORE_NAME="Test Shop",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def api_product(client):
    """Factory creating products through the HTTP API."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Item {n}",
            "barcode": f"3000000{n:05d}",
            "purchase_price": 40.0,
            "sale_price": 100.0,
            "quantity": 10,
            "category": "Cables",
        }
        data.update(overrides)
        resp = client.post("/api/v1/products", json=data)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
