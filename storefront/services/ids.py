"""Human-readable record identifiers: ``<PREFIX>-<base36 ms>-<4 random>``.

Uniqueness rests on the millisecond clock plus 4 random base36 characters,
which is enough for a single bakery's order volume. Tracking relies on the
``ORD-`` prefix to tell an order id from a phone number.
"""
import random
import string
import time

ORDER_PREFIX = "ORD"
PRODUCT_PREFIX = "PROD"

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding expects a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_id(prefix: str, now_ms: int = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=4))
    return f"{prefix}-{to_base36(now_ms)}-{suffix}"


def is_order_id(text: str) -> bool:
    return bool(text) and text.startswith(ORDER_PREFIX + "-")
