import pytest

from pos_app.services import barcode_service
from pos_app.services.barcode_service import BarcodeScanner


def test_ean13_check_digit_known_code():
    assert barcode_service.ean13_check_digit("400638133393") == "1"
    assert barcode_service.validate_ean13("4006381333931")
    assert not barcode_service.validate_ean13("4006381333932")
    assert not barcode_service.validate_ean13("12345")


def test_generated_ean13_is_valid():
    for _ in range(20):
        assert barcode_service.validate_ean13(barcode_service.generate_ean13())


def test_custom_prefix():
    code = barcode_service.generate_custom("ACC")
    assert code.startswith("ACC")
    assert len(code) == 13


def test_format_barcode():
    assert barcode_service.format_barcode("4006381333931", "EAN13") == "4-006381-333931"
    assert barcode_service.format_barcode("ABC123", "CODE128") == "ABC123"


def test_generate_unique_barcode_skips_taken(store, make_product, monkeypatch):
    make_product(barcode="4006381333931")
    codes = iter(["4006381333931", "5901234123457"])
    monkeypatch.setattr(barcode_service, "generate_ean13", lambda: next(codes))

    assert barcode_service.generate_unique_barcode(store, "EAN13") == "5901234123457"


def test_generate_unique_barcode_unknown_kind(store):
    with pytest.raises(ValueError):
        barcode_service.generate_unique_barcode(store, "QR")


def test_lookup_barcode(store, make_product):
    product = make_product(barcode="5901234123457")
    assert barcode_service.lookup_barcode(store, " 5901234123457 ").id == product.id
    assert barcode_service.lookup_barcode(store, "0000000000000") is None


def test_scanner_emits_on_enter():
    scanner = BarcodeScanner()
    seen = []
    scanner.on_barcode_scanned(seen.append)

    t = 100.0
    for key in "590123":
        scanner.feed_key(key, at=t)
        t += 0.01
    assert scanner.feed_key("Enter", at=t) == "590123"
    assert seen == ["590123"]


def test_scanner_slow_typing_starts_new_buffer():
    scanner = BarcodeScanner()
    scanner.feed_key("1", at=0.0)
    scanner.feed_key("2", at=0.01)
    scanner.feed_key("9", at=1.0)
    assert scanner.feed_key("Enter", at=1.01) == "9"


def test_scanner_ignores_enter_without_code_and_removed_listeners():
    scanner = BarcodeScanner()
    seen = []
    scanner.on_barcode_scanned(seen.append)
    assert scanner.feed_key("Enter", at=0.0) is None

    scanner.remove_barcode_listener(seen.append)
    scanner.emit("123")
    assert seen == []
