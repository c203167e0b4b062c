#!/usr/bin/env python3
"""
Order service: the dual-mode facade over the hosted backend and the local
fallback store.

Which backend to use is decided on every call: the hosted backend when both
its URL and key are set, otherwise the local store. Reads degrade to
None / [] / False when the hosted backend fails; only create_order raises.
"""

from typing import Any, Dict, List, Optional, Union

from ..data.local_store import ORDERS_KEY
from ..schemas.order_models import Order, OrderCreate, OrderStatus
from ..utils.errors import PersistenceError
from ..utils.logger import get_logger
from ..utils.security import mask_pii
from .base_service import BaseService, iso_timestamp, later_timestamp
from .ids import ORDER_PREFIX, new_id

logger = get_logger("orders")


def _newest_first(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # sorted() is stable with reverse=True, so equal timestamps keep stored order
    return sorted(records, key=lambda r: r.get("created_at") or "", reverse=True)


def status_value(status: Union[OrderStatus, str]) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)


class OrderService(BaseService):
    name = "order"
    table = "orders"
    local_key = ORDERS_KEY

    def parse(self, record: Dict[str, Any]) -> Order:
        return Order.model_validate(record)

    def _save_local(self, records: List[Dict[str, Any]]) -> None:
        try:
            self.write_local(records)
        except Exception as e:
            logger.error("Local order store write failed: %s", e)
            raise PersistenceError(f"Could not save orders: {e}") from e

    def create_order(self, fields: Union[OrderCreate, Dict[str, Any]]) -> Order:
        """
        Create a new order in the active backend.

        Args:
            fields: Customer-supplied order fields

        Returns:
            The full stored record (id assigned, status pending)

        Raises:
            PersistenceError: if the backend could not store the order
        """
        if not isinstance(fields, OrderCreate):
            fields = OrderCreate.model_validate(fields)

        moment = self.now()
        now = iso_timestamp(moment)
        order = Order.model_validate({
            **fields.model_dump(by_alias=True),
            "id": new_id(ORDER_PREFIX, int(moment.timestamp() * 1000)),
            "status": OrderStatus.pending.value,
            "created_at": now,
            "updated_at": now,
        })

        if self.use_remote():
            row = self.remote().insert(self.table, order.to_record())
            logger.info("Order %s created (remote) for %s", order.id, mask_pii(order.customer_phone))
            return self.parse(row)

        records = self.read_local()
        records.insert(0, order.to_record())
        self._save_local(records)
        logger.info("Order %s created (local) for %s", order.id, mask_pii(order.customer_phone))
        return order

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        if self.use_remote():
            try:
                rows = self.remote().select(self.table, {"id": order_id})
            except PersistenceError as e:
                logger.warning("Order lookup %s failed: %s", order_id, e)
                return None
            if len(rows) != 1:
                return None
            found = self.parse_many(rows)
            return found[0] if found else None

        for record in self.read_local():
            if isinstance(record, dict) and record.get("id") == order_id:
                found = self.parse_many([record])
                return found[0] if found else None
        return None

    def get_orders_by_phone(self, phone: str) -> List[Order]:
        """Exact string match on customer_phone, newest first. No normalization."""
        if self.use_remote():
            try:
                rows = self.remote().select(self.table, {"customer_phone": phone}, order=("created_at", True))
            except PersistenceError as e:
                logger.warning("Phone lookup for %s failed: %s", mask_pii(phone), e)
                return []
            return self.parse_many(rows)

        matches = [r for r in self.read_local() if isinstance(r, dict) and r.get("customer_phone") == phone]
        return self.parse_many(_newest_first(matches))

    def get_all_orders(self) -> List[Order]:
        if self.use_remote():
            try:
                rows = self.remote().select(self.table, order=("created_at", True))
            except PersistenceError as e:
                logger.warning("Listing orders failed: %s", e)
                return []
            return self.parse_many(rows)

        records = [r for r in self.read_local() if isinstance(r, dict)]
        return self.parse_many(_newest_first(records))

    def update_order_status(
        self,
        order_id: str,
        new_status: Union[OrderStatus, str],
        owner_notes: Optional[str] = None,
    ) -> Optional[Order]:
        """
        Set the status (any value, no transition checks) and refresh updated_at.

        owner_notes replaces the stored note only when it is not None.
        Returns None when the order does not exist.
        """
        status = status_value(new_status)
        moment = self.now()

        if self.use_remote():
            values: Dict[str, Any] = {"status": status, "updated_at": iso_timestamp(moment)}
            if owner_notes is not None:
                values["owner_notes"] = owner_notes
            try:
                rows = self.remote().update(self.table, values, {"id": order_id})
            except PersistenceError as e:
                logger.warning("Status update for %s failed: %s", order_id, e)
                return None
            if not rows:
                return None
            logger.info("Order %s -> %s (remote)", order_id, status)
            found = self.parse_many(rows[:1])
            return found[0] if found else None

        records = self.read_local()
        for record in records:
            if isinstance(record, dict) and record.get("id") == order_id:
                record["status"] = status
                record["updated_at"] = later_timestamp(moment, record.get("updated_at"))
                if owner_notes is not None:
                    record["owner_notes"] = owner_notes
                self._save_local(records)
                logger.info("Order %s -> %s (local)", order_id, status)
                found = self.parse_many([record])
                return found[0] if found else None
        return None

    def delete_order(self, order_id: str) -> bool:
        if self.use_remote():
            try:
                rows = self.remote().delete(self.table, {"id": order_id})
            except PersistenceError as e:
                logger.warning("Deleting order %s failed: %s", order_id, e)
                return False
            return len(rows) > 0

        records = self.read_local()
        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == order_id)]
        self._save_local(remaining)
        removed = len(remaining) < len(records)
        if removed:
            logger.info("Order %s deleted (local)", order_id)
        return removed
