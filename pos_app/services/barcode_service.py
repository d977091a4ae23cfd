import random
import re
import time
from typing import Callable

from pos_app.models.product import Product
from pos_app.services.store import Store

# Keys typed closer together than this belong to the same scan
SCAN_KEY_GAP_SECONDS = 0.05

_BARCODE_CHAR = re.compile(r"^[0-9a-zA-Z\-_.]$")

BarcodeHandler = Callable[[str], None]


class BarcodeScanner:
    """Turns keyboard-wedge scanner keystrokes into barcode strings.

    A scanner "types" the code fast and ends it with Enter; a human typing
    is slower, so a gap over ``SCAN_KEY_GAP_SECONDS`` starts a new buffer.
    """

    def __init__(self, key_gap: float = SCAN_KEY_GAP_SECONDS):
        self.key_gap = key_gap
        self._listeners: list[BarcodeHandler] = []
        self._buffer = ""
        self._last_key_at: float | None = None

    def on_barcode_scanned(self, handler: BarcodeHandler) -> None:
        self._listeners.append(handler)

    def remove_barcode_listener(self, handler: BarcodeHandler) -> None:
        self._listeners = [h for h in self._listeners if h != handler]

    def feed_key(self, key: str, at: float | None = None) -> str | None:
        """Process one keystroke; returns the barcode when Enter completes one."""
        now = time.monotonic() if at is None else at
        if self._last_key_at is not None and now - self._last_key_at > self.key_gap:
            self._buffer = ""
        self._last_key_at = now

        if key == "Enter":
            if not self._buffer:
                return None
            code, self._buffer = self._buffer, ""
            self.emit(code)
            return code

        if _BARCODE_CHAR.match(key):
            self._buffer += key
        return None

    def emit(self, barcode: str) -> None:
        for handler in list(self._listeners):
            handler(barcode)


def lookup_barcode(store: Store, barcode: str) -> Product | None:
    return store.get_by_index(Product, "barcode", barcode.strip())


# --- Generation ---

def ean13_check_digit(first12: str) -> str:
    total = sum(int(d) if i % 2 == 0 else int(d) * 3 for i, d in enumerate(first12[:12]))
    return str((10 - total % 10) % 10)


def generate_ean13() -> str:
    body = "".join(str(random.randint(0, 9)) for _ in range(12))
    return body + ean13_check_digit(body)


def validate_ean13(barcode: str) -> bool:
    if len(barcode) != 13 or not barcode.isdigit():
        return False
    return barcode[-1] == ean13_check_digit(barcode[:12])


def generate_code128() -> str:
    return f"{int(time.time() * 1000)}{random.randint(0, 999):03d}"


def generate_custom(prefix: str = "PRD") -> str:
    stamp = str(int(time.time() * 1000))[-8:]
    return f"{prefix}{stamp}{random.randint(0, 99):02d}"


def format_barcode(barcode: str, kind: str = "CODE128") -> str:
    if kind == "EAN13" and len(barcode) == 13:
        return f"{barcode[0]}-{barcode[1:7]}-{barcode[7:]}"
    return barcode


def generate_unique_barcode(store: Store, kind: str = "EAN13", attempts: int = 10) -> str:
    """A fresh code of the given kind that no product uses yet."""
    generators = {"EAN13": generate_ean13, "CODE128": generate_code128, "CUSTOM": generate_custom}
    if kind not in generators:
        raise ValueError(f"Unknown barcode kind '{kind}'")
    for _ in range(attempts):
        code = generators[kind]()
        if lookup_barcode(store, code) is None:
            return code
    raise RuntimeError(f"Could not generate an unused {kind} barcode after {attempts} attempts")
