"""BaseService: backend routing shared by the order and product services."""
from abc import ABC, abstractmethod
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..app.config import BackendConfig
from ..data.local_store import KeyValueStore, get_local_store
from ..data.remote_client import SupabaseClient
from ..utils.logger import get_logger

logger = get_logger("services")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class MillisecondClock:
    """UTC clock that never hands out the same millisecond twice in this process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last_ms = 0

    def __call__(self) -> datetime:
        with self._lock:
            ms = (utc_now() - _EPOCH) // timedelta(milliseconds=1)
            if ms <= self._last_ms:
                ms = self._last_ms + 1
            self._last_ms = ms
        return _EPOCH + timedelta(milliseconds=ms)


default_clock = MillisecondClock()


def iso_timestamp(moment: datetime) -> str:
    """``2024-05-01T09:30:00.123Z``: millisecond precision, sortable as text."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def later_timestamp(moment: datetime, previous: Optional[str]) -> str:
    """iso_timestamp(moment), moved 1 ms past ``previous`` if it would not sort after it."""
    stamp = iso_timestamp(moment)
    if not previous or stamp > previous:
        return stamp
    try:
        last = datetime.strptime(previous, _ISO_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return stamp
    return iso_timestamp(last + timedelta(milliseconds=1))


class BaseService(ABC):
    name: str = "base"
    table: str = ""
    local_key: str = ""

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        local_store: Optional[KeyValueStore] = None,
        remote_factory: Callable[[BackendConfig], SupabaseClient] = None,
        clock: Callable[[], datetime] = None,
    ):
        # config=None means "read the environment on every call"
        self.config = config
        self._local_store = local_store
        self._remote_factory = remote_factory or SupabaseClient.from_config
        self._clock = clock or default_clock

    @abstractmethod
    def parse(self, record: Dict[str, Any]):
        """Turn one stored row into the service's pydantic record."""
        ...

    def parse_many(self, records: Iterable[Dict[str, Any]]) -> List[Any]:
        parsed = []
        for record in records:
            try:
                parsed.append(self.parse(record))
            except (ValidationError, TypeError) as e:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning("Skipping malformed %s record %r: %s", self.name, record_id, e)
        return parsed

    def backend_config(self) -> BackendConfig:
        return self.config if self.config is not None else BackendConfig.from_env()

    def use_remote(self) -> bool:
        return self.backend_config().is_remote_configured()

    def remote(self) -> SupabaseClient:
        return self._remote_factory(self.backend_config())

    @property
    def store(self) -> KeyValueStore:
        if self._local_store is None:
            self._local_store = get_local_store()
        return self._local_store

    def read_local(self) -> List[Dict[str, Any]]:
        return self.store.read_all(self.local_key)

    def write_local(self, records: List[Dict[str, Any]]) -> None:
        self.store.write_all(self.local_key, records)

    def now(self) -> datetime:
        return self._clock()

    def now_iso(self) -> str:
        return iso_timestamp(self.now())

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)
