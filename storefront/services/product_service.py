#!/usr/bin/env python3
"""
Catalog service: same dual-mode routing as the order service, plus image
upload and the built-in menu fallback.
"""

from typing import Any, Dict, List, Optional, Union

from ..data.local_store import PRODUCTS_KEY
from ..data.seed_catalog import default_products
from ..schemas.product_models import Product, ProductInput, ProductUpdate
from ..utils.errors import PersistenceError
from ..utils.logger import get_logger
from .base_service import BaseService, iso_timestamp, later_timestamp
from .ids import PRODUCT_PREFIX, new_id
from .storage_service import ImageStorage

logger = get_logger("products")


def _is_active(value: Any) -> bool:
    # Hand-edited records may hold "true"/"false" or 1/0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _by_sort_order(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    def key(r):
        try:
            return int(r.get("sort_order") or 0)
        except (TypeError, ValueError):
            return 0
    return sorted(records, key=key)


class ProductService(BaseService):
    name = "product"
    table = "products"
    local_key = PRODUCTS_KEY

    def __init__(self, *args, storage: ImageStorage = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.storage = storage or ImageStorage(config=self.config, remote_factory=self._remote_factory)

    def parse(self, record: Dict[str, Any]) -> Product:
        return Product.model_validate(record)

    def _local_records(self) -> List[Dict[str, Any]]:
        return [r for r in self.read_local() if isinstance(r, dict)]

    def _save_local(self, records: List[Dict[str, Any]]) -> None:
        try:
            self.write_local(records)
        except Exception as e:
            logger.error("Local product store write failed: %s", e)
            raise PersistenceError(f"Could not save products: {e}") from e

    def get_active_products(self) -> List[Product]:
        """Active catalog by sort_order; never empty (falls back to the seed menu)."""
        if self.use_remote():
            try:
                rows = self.remote().select(self.table, {"is_active": True}, order=("sort_order", False))
            except PersistenceError as e:
                logger.warning("Loading active products failed, showing default menu: %s", e)
                return default_products()
            products = self.parse_many(rows)
        else:
            active = [r for r in self._local_records() if _is_active(r.get("is_active"))]
            products = self.parse_many(_by_sort_order(active))

        return products if products else default_products()

    def get_all_products(self) -> List[Product]:
        if self.use_remote():
            try:
                rows = self.remote().select(self.table, order=("sort_order", False))
            except PersistenceError as e:
                logger.warning("Listing products failed, using local copy: %s", e)
                return self.parse_many(self._local_records())
            return self.parse_many(rows)
        return self.parse_many(_by_sort_order(self._local_records()))

    def create_product(self, data: Union[ProductInput, Dict[str, Any]]) -> Product:
        if not isinstance(data, ProductInput):
            data = ProductInput.model_validate(data)

        moment = self.now()
        now = iso_timestamp(moment)
        product = Product(
            **data.model_dump(),
            id=new_id(PRODUCT_PREFIX, int(moment.timestamp() * 1000)),
            created_at=now,
            updated_at=now,
        )

        if self.use_remote():
            row = self.remote().insert(self.table, product.to_record())
            logger.info("Product %s created (remote)", product.id)
            return self.parse(row)

        records = self.read_local()
        records.append(product.to_record())
        self._save_local(records)
        logger.info("Product %s created (local)", product.id)
        return product

    def update_product(self, product_id: str, updates: Union[ProductUpdate, Dict[str, Any]]) -> Optional[Product]:
        if not isinstance(updates, ProductUpdate):
            updates = ProductUpdate.model_validate(updates)
        changes = updates.model_dump(exclude_unset=True)
        moment = self.now()
        changes["updated_at"] = iso_timestamp(moment)

        if self.use_remote():
            try:
                rows = self.remote().update(self.table, changes, {"id": product_id})
            except PersistenceError as e:
                logger.warning("Updating product %s failed: %s", product_id, e)
                return None
            found = self.parse_many(rows[:1])
            return found[0] if found else None

        records = self.read_local()
        for idx, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == product_id:
                records[idx] = {**record, **changes, "updated_at": later_timestamp(moment, record.get("updated_at"))}
                self._save_local(records)
                found = self.parse_many([records[idx]])
                return found[0] if found else None
        return None

    def set_product_active(self, product_id: str, is_active: bool) -> Optional[Product]:
        """Soft hide/show without deleting the entry."""
        return self.update_product(product_id, ProductUpdate(is_active=is_active))

    def delete_product(self, product_id: str) -> bool:
        if self.use_remote():
            try:
                rows = self.remote().delete(self.table, {"id": product_id})
            except PersistenceError as e:
                logger.warning("Deleting product %s failed: %s", product_id, e)
                return False
            return len(rows) > 0

        records = self.read_local()
        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == product_id)]
        self._save_local(remaining)
        return len(remaining) < len(records)

    def upload_image(self, filename: str, content: bytes, content_type: str) -> str:
        return self.storage.upload_image(filename, content, content_type, folder="products")
