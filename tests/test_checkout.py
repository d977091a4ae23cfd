from datetime import timedelta

import pytest

from pos_app.exceptions import CommitFailed, PartialCommitError, StoreUnavailableError, WorkflowRejected
from pos_app.models.invoice import Invoice, PaymentMethod
from pos_app.models.product import Product
from pos_app.schemas.invoice import CheckoutLine, CheckoutRequest
from pos_app.services.checkout_service import CheckoutWorkflow, checkout, list_invoices
from pos_app.services.workflow import WorkflowState


def test_single_line_cash_sale(store, ledger, make_product):
    product = make_product(quantity=10, sale_price=500.0)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 3)

    invoice = workflow.submit(discount=0, payment_method="cash")

    assert invoice.total == 1500.0
    assert invoice.subtotal == 1500.0
    assert invoice.payment_method == PaymentMethod.CASH
    assert store.get(Product, product.id).quantity == 7
    assert workflow.state == WorkflowState.COMMITTED
    assert workflow.cart.is_empty()


def test_add_more_than_stock_is_rejected_before_any_write(store, ledger, make_product):
    product = make_product(quantity=2)
    workflow = CheckoutWorkflow(store, ledger)

    with pytest.raises(WorkflowRejected):
        workflow.add(product.id, 5)

    assert workflow.cart.is_empty()
    assert store.get(Product, product.id).quantity == 2
    assert store.get_all(Invoice) == []


def test_cumulative_adds_checked_against_live_stock(store, ledger, make_product):
    product = make_product(quantity=3)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 2)
    with pytest.raises(WorkflowRejected):
        workflow.add(product.id, 2)
    assert workflow.cart.lines[0].quantity == 2


def test_out_of_stock_product_cannot_be_added(store, ledger, make_product):
    product = make_product(quantity=0)
    with pytest.raises(WorkflowRejected):
        CheckoutWorkflow(store, ledger).add(product.id)


def test_invoice_arithmetic_with_discount(store, ledger, make_product):
    a = make_product(sale_price=100.0)
    b = make_product(sale_price=50.0)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(a.id, 2)
    workflow.add(b.id, 1)

    invoice = workflow.submit(discount=20)

    assert invoice.subtotal == 250.0
    assert invoice.total == 230.0
    assert [item.total for item in invoice.items] == [200.0, 50.0]
    for item in invoice.items:
        assert item.total == item.quantity * item.price


def test_invoice_lines_hold_product_snapshots(store, ledger, make_product):
    product = make_product(name="USB-C Cable", purchase_price=4.0, sale_price=10.0)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 1)
    invoice = workflow.submit()

    product.name = "Renamed"
    store.replace(product)

    saved = store.get(Invoice, invoice.id)
    assert saved.items[0].product["name"] == "USB-C Cable"
    assert saved.items[0].product["purchase_price"] == 4.0


def test_price_override(store, ledger, make_product):
    product = make_product(sale_price=10.0)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 2, price=8.0)
    assert workflow.submit().total == 16.0


def test_set_quantity_and_remove(store, ledger, make_product):
    a = make_product(quantity=5)
    b = make_product(quantity=5)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(a.id)
    workflow.add(b.id)

    workflow.set_quantity(a.id, 4)
    assert workflow.cart.lines[0].quantity == 4
    with pytest.raises(WorkflowRejected):
        workflow.set_quantity(a.id, 6)

    workflow.set_quantity(b.id, 0)
    assert [line.product_id for line in workflow.cart.lines] == [a.id]

    workflow.remove(a.id)
    assert workflow.cart.is_empty()
    assert workflow.state == WorkflowState.SELECTING_TARGET


def test_empty_cart_rejected(store, ledger):
    with pytest.raises(WorkflowRejected):
        CheckoutWorkflow(store, ledger).submit()


@pytest.mark.parametrize("discount", [-1, 11])
def test_bad_discount_rejected(store, ledger, make_product, discount):
    product = make_product(sale_price=10.0)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id)
    with pytest.raises(WorkflowRejected):
        workflow.submit(discount=discount)
    assert store.get_all(Invoice) == []
    assert workflow.state == WorkflowState.ENTERING_DETAILS


def test_unknown_payment_method_rejected(store, ledger, make_product):
    product = make_product()
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id)
    with pytest.raises(WorkflowRejected):
        workflow.submit(payment_method="bitcoin")


def test_sale_floors_quantity_when_stock_dropped_after_add(store, ledger, make_product):
    product = make_product(quantity=3)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 3)
    # Another terminal sells two units while this cart is open
    ledger.adjust_quantity(product.id, 1)

    workflow.submit()

    assert store.get(Product, product.id).quantity == 0


def test_record_write_failure_writes_nothing(store, ledger, make_product, monkeypatch):
    product = make_product(quantity=5)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(product.id, 2)

    def broken_add(record):
        raise StoreUnavailableError("disk full")

    monkeypatch.setattr(store, "add", broken_add)
    with pytest.raises(CommitFailed) as exc:
        workflow.submit()
    monkeypatch.undo()

    assert not isinstance(exc.value, PartialCommitError)
    assert workflow.state == WorkflowState.FAILED
    assert store.get_all(Invoice) == []
    assert store.get(Product, product.id).quantity == 5


def test_adjustment_failure_reports_partial_commit(store, ledger, make_product, monkeypatch):
    a = make_product(quantity=5)
    b = make_product(quantity=5)
    workflow = CheckoutWorkflow(store, ledger)
    workflow.add(a.id, 1)
    workflow.add(b.id, 2)

    real_record_sale = ledger.record_sale

    def flaky_record_sale(product_id, quantity):
        if product_id == b.id:
            raise StoreUnavailableError("database is locked")
        return real_record_sale(product_id, quantity)

    monkeypatch.setattr(ledger, "record_sale", flaky_record_sale)
    with pytest.raises(PartialCommitError) as exc:
        workflow.submit()
    monkeypatch.undo()

    err = exc.value
    assert err.adjusted == [a.id]
    assert err.pending == [b.id]
    assert store.get(Invoice, err.record_id) is not None
    assert store.get(Product, a.id).quantity == 4
    assert store.get(Product, b.id).quantity == 5
    assert workflow.state == WorkflowState.FAILED


def test_checkout_request_runs_whole_sale(store, ledger, make_product):
    product = make_product(quantity=4, sale_price=25.0)
    request = CheckoutRequest(
        items=[CheckoutLine(product_id=product.id, quantity=2)],
        discount=5.0,
        payment_method="card",
        customer_name="Sara",
    )

    invoice = checkout(store, ledger, request)

    assert invoice.total == 45.0
    assert invoice.customer_name == "Sara"
    assert store.get(Product, product.id).quantity == 2


def test_checkout_request_rejects_unknown_product(store, ledger):
    request = CheckoutRequest(items=[CheckoutLine(product_id="ghost", quantity=1)])
    with pytest.raises(WorkflowRejected):
        checkout(store, ledger, request)


def test_list_invoices_newest_first_and_date_filter(store, ledger, make_product):
    product = make_product(quantity=10)
    older = checkout(store, ledger, CheckoutRequest(items=[CheckoutLine(product_id=product.id)]))
    newer = checkout(store, ledger, CheckoutRequest(items=[CheckoutLine(product_id=product.id)]))
    older.created_at = newer.created_at - timedelta(days=2)
    store.replace(older)

    assert [i.id for i in list_invoices(store)] == [newer.id, older.id]
    assert [i.id for i in list_invoices(store, start=newer.created_at - timedelta(days=1))] == [newer.id]
    assert [i.id for i in list_invoices(store, end=newer.created_at - timedelta(days=1))] == [older.id]


def test_same_product_at_two_prices_rejected(store, ledger, make_product):
    product = make_product(quantity=5, sale_price=10.0)
    request = CheckoutRequest(items=[
        CheckoutLine(product_id=product.id, quantity=1, price=8.0),
        CheckoutLine(product_id=product.id, quantity=1, price=9.0),
    ])

    with pytest.raises(WorkflowRejected):
        checkout(store, ledger, request)
    assert store.get_all(Invoice) == []
    assert store.get(Product, product.id).quantity == 5


def test_same_product_at_same_price_merges(store, ledger, make_product):
    product = make_product(quantity=5, sale_price=10.0)
    request = CheckoutRequest(items=[
        CheckoutLine(product_id=product.id, quantity=1, price=8.0),
        CheckoutLine(product_id=product.id, quantity=2, price=8.0),
    ])

    invoice = checkout(store, ledger, request)

    assert len(invoice.items) == 1
    assert invoice.items[0].quantity == 3
    assert invoice.total == 24.0
