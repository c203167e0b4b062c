"""Shared fixtures for the storefront test suites."""
import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

# Make the repo root importable when tests run without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from storefront.app.config import BackendConfig
from storefront.data.local_store import MemoryStore
from storefront.schemas.order_models import OrderCreate


class FakeClock:
    """Deterministic clock: every call moves forward by ``step``."""

    def __init__(self, start: datetime = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def local_config() -> BackendConfig:
    return BackendConfig(url="", key="")


def remote_config() -> BackendConfig:
    return BackendConfig(url="https://example.supabase.co", key="anon-key")


def fake_remote():
    """MagicMock standing in for SupabaseClient, echoing inserted rows back."""
    remote = MagicMock()
    remote.insert.side_effect = lambda table, row: dict(row)
    remote.select.return_value = []
    remote.update.return_value = []
    remote.delete.return_value = []
    return remote


def sample_order(**overrides) -> OrderCreate:
    fields = {
        "customer_name": "Priya Sharma",
        "customer_phone": "+919876543210",
        "event_date": "2024-06-15",
        "cake_flavor": "Chocolate Truffle",
        "cake_weight": "2 kg",
        "occasion": "Birthday",
        "details": "Pink roses on top, 'Happy 30th Priya'",
    }
    fields.update(overrides)
    return OrderCreate(**fields)


def new_memory_store() -> MemoryStore:
    return MemoryStore()
