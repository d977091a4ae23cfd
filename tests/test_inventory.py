from pos_app.models.product import Product


def test_adjust_quantity_sets_value_and_timestamp(store, ledger, make_product):
    product = make_product(quantity=10)
    updated = ledger.adjust_quantity(product.id, 4)
    assert updated.quantity == 4
    assert updated.updated_at >= product.updated_at
    assert store.get(Product, product.id).quantity == 4


def test_adjust_quantity_clamp(store, ledger, make_product):
    product = make_product(quantity=2)
    ledger.adjust_quantity(product.id, -3, clamp=True)
    assert store.get(Product, product.id).quantity == 0


def test_adjust_quantity_without_clamp_allows_negative(store, ledger, make_product):
    product = make_product(quantity=2)
    ledger.adjust_quantity(product.id, -3)
    assert store.get(Product, product.id).quantity == -3


def test_missing_product_is_a_noop(store, ledger, caplog):
    with caplog.at_level("WARNING"):
        assert ledger.adjust_quantity("ghost", 5) is None
        assert ledger.record_sale("ghost", 1) is None
    assert store.get(Product, "ghost") is None
    assert "ghost" in caplog.text


def test_record_sale_floors_at_zero(store, ledger, make_product):
    product = make_product(quantity=2)
    ledger.record_sale(product.id, 5)
    assert store.get(Product, product.id).quantity == 0


def test_restock_adds(store, ledger, make_product):
    product = make_product(quantity=3)
    ledger.restock(product.id, 2)
    assert store.get(Product, product.id).quantity == 5


def test_write_off_floors_at_zero(store, ledger, make_product):
    product = make_product(quantity=1)
    ledger.write_off(product.id, 4)
    assert store.get(Product, product.id).quantity == 0


def test_interleaved_adjustments_lose_an_update(store, ledger, make_product, monkeypatch):
    """Two sales that both read before either writes: the later write wins."""
    product = make_product(quantity=10)
    stale = store.get(Product, product.id)

    ledger.record_sale(product.id, 3)
    assert store.get(Product, product.id).quantity == 7

    # Second terminal still holds the quantity it read before the first sale
    monkeypatch.setattr(store, "get", lambda kind, key: stale)
    ledger.record_sale(product.id, 2)
    monkeypatch.undo()

    assert store.get(Product, product.id).quantity == 8
