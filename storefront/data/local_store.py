#!/usr/bin/env python3
"""
Local fallback store for the storefront.

Used whenever the hosted backend is not configured. Each entity type lives
in ONE serialized JSON collection under a fixed key; every mutation reads the
whole collection and writes the whole collection back. Missing or corrupt
data reads as an empty collection.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import redis

from ..app.config import Config
from ..utils.logger import get_logger

logger = get_logger("local_store")

ORDERS_KEY = "samyra_orders"
PRODUCTS_KEY = "samyra_products"


class KeyValueStore(ABC):
    """String key-value capability with whole-collection helpers."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def read_all(self, key: str) -> List[Dict[str, Any]]:
        """
        Read the full collection stored under ``key``.

        Returns:
            The decoded list, or [] when the key is missing, unreadable or
            does not hold a JSON list.
        """
        try:
            raw = self.get(key)
        except Exception as e:
            logger.warning("Local store read failed for %s: %s", key, e)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Corrupt data under %s, treating as empty: %s", key, e)
            return []
        if not isinstance(data, list):
            logger.warning("Unexpected %s payload under %s, treating as empty", type(data).__name__, key)
            return []
        return data

    def write_all(self, key: str, items: List[Dict[str, Any]]) -> None:
        self.set(key, json.dumps(items, ensure_ascii=False))


class MemoryStore(KeyValueStore):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str = None):
        self.directory = os.path.abspath(directory or Config.LOCAL_STORE_DIR)
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, key: str) -> str:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return os.path.join(self.directory, f"{safe}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        # Each write gets its own temp file; concurrent writers never share one
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f"{os.path.basename(path)}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


class RedisStore(KeyValueStore):
    def __init__(self, client: "redis.Redis" = None):
        self.redis_client = client or redis.Redis(
            host=Config.REDIS_HOST,
            port=Config.REDIS_PORT,
            db=Config.REDIS_DB,
            decode_responses=True
        )

    def get(self, key: str) -> Optional[str]:
        return self.redis_client.get(key)

    def set(self, key: str, value: str) -> None:
        self.redis_client.set(key, value)

    def delete(self, key: str) -> None:
        self.redis_client.delete(key)


_store: Optional[KeyValueStore] = None


def build_local_store(backend: str = None) -> KeyValueStore:
    """Create the store named by ``backend`` (file|redis|memory)."""
    backend = (backend or Config.LOCAL_STORE_BACKEND).lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "redis":
        try:
            store = RedisStore()
            # Test Redis connection
            store.redis_client.ping()
            logger.info("Using Redis for the local fallback store")
            return store
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis not available (%s), using in-memory fallback store", e)
            return MemoryStore()
    return JsonFileStore()


def get_local_store() -> KeyValueStore:
    global _store
    if _store is None:
        _store = build_local_store()
    return _store
