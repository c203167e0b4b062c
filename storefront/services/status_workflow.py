"""Order status workflow: display tables and the admin "advance" sequence.

Nothing here is enforced on writes; update_order_status accepts any value.
These tables only drive what the admin dashboard offers and how tracking
renders progress.
"""
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Union

from ..schemas.order_models import Order, OrderStatus
from ..utils.logger import get_logger

logger = get_logger("workflow")

StatusLike = Union[OrderStatus, str]

LINEAR_SEQUENCE = (
    OrderStatus.pending,
    OrderStatus.confirmed,
    OrderStatus.baking,
    OrderStatus.ready,
    OrderStatus.out_for_delivery,
    OrderStatus.delivered,
)

TERMINAL_STATUSES = frozenset({OrderStatus.delivered, OrderStatus.cancelled})

STATUS_CONFIG: "OrderedDict[OrderStatus, Dict[str, str]]" = OrderedDict([
    (OrderStatus.pending, {"label": "Pending", "color": "yellow"}),
    (OrderStatus.confirmed, {"label": "Confirmed", "color": "blue"}),
    (OrderStatus.baking, {"label": "Baking", "color": "orange"}),
    (OrderStatus.ready, {"label": "Ready", "color": "purple"}),
    (OrderStatus.out_for_delivery, {"label": "Out for Delivery", "color": "indigo"}),
    (OrderStatus.delivered, {"label": "Delivered", "color": "green"}),
    (OrderStatus.cancelled, {"label": "Cancelled", "color": "red"}),
])

# Timeline captions on the customer tracking page
TRACKING_STEPS = OrderedDict([
    (OrderStatus.pending, "Order Received"),
    (OrderStatus.confirmed, "Confirmed"),
    (OrderStatus.baking, "Baking"),
    (OrderStatus.ready, "Ready"),
    (OrderStatus.out_for_delivery, "Out for Delivery"),
    (OrderStatus.delivered, "Delivered"),
])

NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    current: following for current, following in zip(LINEAR_SEQUENCE, LINEAR_SEQUENCE[1:])
}

UNKNOWN_LABEL = "Unknown"


def coerce_status(status: StatusLike) -> Optional[OrderStatus]:
    """The matching OrderStatus, or None for an unsupported value."""
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        return None


def status_label(status: StatusLike) -> str:
    known = coerce_status(status)
    if known is None:
        logger.warning("No display mapping for order status %r", status)
        return UNKNOWN_LABEL
    return STATUS_CONFIG[known]["label"]


def status_color(status: StatusLike) -> str:
    known = coerce_status(status)
    return STATUS_CONFIG[known]["color"] if known else "gray"


def next_status(status: StatusLike) -> Optional[OrderStatus]:
    known = coerce_status(status)
    return NEXT_STATUS.get(known) if known else None


def can_cancel(status: StatusLike) -> bool:
    known = coerce_status(status)
    return known is not None and known not in TERMINAL_STATUSES


def progress_index(status: StatusLike) -> int:
    """Position in LINEAR_SEQUENCE; -1 for cancelled (and unknown) values."""
    known = coerce_status(status)
    if known is None or known is OrderStatus.cancelled:
        return -1
    return LINEAR_SEQUENCE.index(known)


def progress_fraction(status: StatusLike) -> Optional[float]:
    index = progress_index(status)
    if index < 0:
        return None
    return index / (len(LINEAR_SEQUENCE) - 1)


def available_actions(status: StatusLike) -> Dict[str, object]:
    following = next_status(status)
    return {
        "advance_to": following.value if following else None,
        "advance_label": STATUS_CONFIG[following]["label"] if following else None,
        "can_cancel": can_cancel(status),
    }


def status_counts(orders: Iterable[Order]) -> Dict[str, int]:
    counts = {status.value: 0 for status in STATUS_CONFIG}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return counts


def filter_by_status(orders: Iterable[Order], status: Optional[StatusLike] = None) -> List[Order]:
    """``None`` or ``"all"`` keeps everything."""
    if status is None or status == "all":
        return list(orders)
    wanted = status.value if isinstance(status, OrderStatus) else status
    return [o for o in orders if o.status == wanted]


def workflow_descriptor() -> Dict[str, object]:
    """Everything a UI needs to render badges, timeline and admin buttons."""
    return {
        "sequence": [s.value for s in LINEAR_SEQUENCE],
        "statuses": [
            {"value": s.value, "label": cfg["label"], "color": cfg["color"]}
            for s, cfg in STATUS_CONFIG.items()
        ],
        "tracking_steps": [{"value": s.value, "label": label} for s, label in TRACKING_STEPS.items()],
        "next_status": {k.value: v.value for k, v in NEXT_STATUS.items()},
        "cancellable": [s.value for s in STATUS_CONFIG if can_cancel(s)],
    }
