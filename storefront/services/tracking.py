"""Order tracking search and the phone-based customer link.

Signed-in customers see their orders through a phone string only: there is
no server-side link between an auth user and an order, so anyone who knows a
phone number can list its orders.
"""
import re
from typing import List, Optional

from ..data.local_store import KeyValueStore
from ..schemas.io_models import AuthUser, TrackedOrder
from ..schemas.order_models import Order, OrderStatus
from ..utils.errors import PersistenceError
from ..utils.logger import get_logger
from .ids import is_order_id
from .order_service import OrderService
from .status_workflow import TRACKING_STEPS, coerce_status, progress_fraction, progress_index, status_label

logger = get_logger("tracking")

_WHITESPACE = re.compile(r"\s")


def track_orders(service: OrderService, query: str) -> List[Order]:
    """
    Look up orders for the tracking page.

    Input starting with ``ORD-`` is treated as an order id, anything else as
    an exact phone number. Failures show as "no orders found".
    """
    if not query or not query.strip():
        return []
    try:
        if is_order_id(query):
            order = service.get_order_by_id(query.strip())
            return [order] if order else []
        return service.get_orders_by_phone(query.strip())
    except PersistenceError as e:
        logger.warning("Tracking search failed: %s", e)
        return []


def describe(order: Order) -> TrackedOrder:
    status = coerce_status(order.status)
    label = TRACKING_STEPS.get(status) or status_label(order.status)
    return TrackedOrder(
        order=order,
        label=label,
        progress_index=progress_index(order.status),
        progress_fraction=progress_fraction(order.status),
        cancelled=status is OrderStatus.cancelled,
    )


def _phone_cache_key(user: AuthUser) -> str:
    return f"user_phone_{user.id}"


def linked_phone(user: AuthUser, store: KeyValueStore) -> Optional[str]:
    """Provider phone, then metadata phone, then the locally cached link."""
    phone = user.phone or user.user_metadata.get("phone")
    if phone:
        return phone
    try:
        return store.get(_phone_cache_key(user)) or None
    except Exception as e:
        logger.warning("Reading cached phone for %s failed: %s", user.id, e)
        return None


def link_phone(user: AuthUser, phone: str, store: KeyValueStore) -> str:
    phone = phone.strip()
    store.set(_phone_cache_key(user), phone)
    return phone


def _strip_spaces(value: str) -> str:
    return _WHITESPACE.sub("", value or "")


def orders_for_phone(service: OrderService, phone: str) -> List[Order]:
    """Orders whose phone matches exactly or once whitespace is removed."""
    if not phone:
        return []
    wanted = _strip_spaces(phone)
    return [
        o for o in service.get_all_orders()
        if o.customer_phone == phone or _strip_spaces(o.customer_phone) == wanted
    ]
