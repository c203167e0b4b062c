"""Exception types shared by the persistence layer, services and API."""
from typing import Optional


class PersistenceError(Exception):
    """Generic failure of the active persistence backend."""


class RemoteBackendError(PersistenceError):
    """Transport or HTTP failure talking to the hosted backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ImageValidationError(ValueError):
    """Upload rejected locally, before any network call."""
