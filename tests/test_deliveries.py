from datetime import datetime

import pytest

from pos_app.exceptions import WorkflowRejected
from pos_app.models.delivery_receipt import DeliveryStatus
from pos_app.models.product import Product
from pos_app.schemas.invoice import CheckoutLine, CheckoutRequest
from pos_app.schemas.transaction import DeliveryCreate
from pos_app.services import delivery_service
from pos_app.services.checkout_service import checkout


@pytest.fixture
def invoice(store, ledger, make_product):
    product = make_product(quantity=5)
    return checkout(store, ledger, CheckoutRequest(items=[CheckoutLine(product_id=product.id)]))


def test_create_delivery_leaves_stock(store, invoice):
    quantities = {p.id: p.quantity for p in store.get_all(Product)}

    receipt = delivery_service.create_delivery(
        store,
        DeliveryCreate(
            invoice_id=invoice.id,
            customer_name="Omar",
            delivery_address="12 Nile St",
            delivery_date=datetime(2024, 5, 1, 10, 30),
        ),
    )

    assert receipt.status == DeliveryStatus.PENDING
    assert receipt.delivery_date == datetime(2024, 5, 1, 10, 30)
    assert delivery_service.get_delivery(store, receipt.id).customer_name == "Omar"
    assert {p.id: p.quantity for p in store.get_all(Product)} == quantities


def test_delivery_date_defaults_to_now(store, invoice):
    receipt = delivery_service.create_delivery(store, DeliveryCreate(invoice_id=invoice.id, customer_name="Omar"))
    assert receipt.delivery_date is not None


def test_unknown_invoice_rejected(store):
    with pytest.raises(WorkflowRejected):
        delivery_service.create_delivery(store, DeliveryCreate(invoice_id="missing", customer_name="Omar"))


def test_list_and_update_status(store, invoice):
    receipt = delivery_service.create_delivery(store, DeliveryCreate(invoice_id=invoice.id, customer_name="Omar"))

    updated = delivery_service.update_delivery_status(store, receipt.id, DeliveryStatus.DELIVERED)
    assert updated.status == DeliveryStatus.DELIVERED

    assert [r.id for r in delivery_service.list_deliveries(store, status=DeliveryStatus.DELIVERED)] == [receipt.id]
    assert delivery_service.list_deliveries(store, status=DeliveryStatus.PENDING) == []
    assert [r.id for r in delivery_service.list_deliveries(store, invoice_id=invoice.id)] == [receipt.id]
    assert delivery_service.update_delivery_status(store, "missing", DeliveryStatus.FAILED) is None
