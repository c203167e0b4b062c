#!/usr/bin/env python3
"""
Thin client for the hosted backend (PostgREST tables + object storage).

Every method is exactly one HTTP call. Field filters are equality only and
there is at most one sort key. Any transport failure or error status raises
RemoteBackendError; callers never see partial data.
"""

from typing import Any, Dict, List, Optional, Tuple

import requests

from ..app.config import BackendConfig, Config
from ..utils.errors import RemoteBackendError
from ..utils.logger import get_logger

logger = get_logger("remote")


def _eq(value: Any) -> str:
    if isinstance(value, bool):
        return "eq." + ("true" if value else "false")
    return f"eq.{value}"


class SupabaseClient:
    """CRUD against ``/rest/v1/<table>`` and uploads to ``/storage/v1``."""

    def __init__(self, url: str, key: str, timeout: float = None, session: requests.Session = None):
        if not url or not key:
            raise ValueError("Remote backend URL and key are required")
        self.base_url = url.rstrip("/")
        self.key = key
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.http = session or requests.Session()

    @classmethod
    def from_config(cls, config: BackendConfig) -> "SupabaseClient":
        return cls(config.url, config.key)

    def _headers(self, extra: Dict[str, str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise RemoteBackendError(f"Remote backend unreachable: {e}") from e
        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error("%s %s -> %s %s", method, url, response.status_code, message)
            raise RemoteBackendError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or str(body)
        return str(body)

    @staticmethod
    def _rows(response: requests.Response) -> List[Dict[str, Any]]:
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteBackendError(f"Malformed response body: {e}") from e
        if isinstance(data, dict):
            return [data]
        return list(data or [])

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _params(self, filters: Optional[Dict[str, Any]], order: Optional[Tuple[str, bool]] = None) -> Dict[str, str]:
        params = {k: _eq(v) for k, v in (filters or {}).items()}
        if order:
            column, descending = order
            params["order"] = f"{column}.{'desc' if descending else 'asc'}"
        return params

    # Tables

    def select(self, table: str, filters: Dict[str, Any] = None, order: Tuple[str, bool] = None) -> List[Dict[str, Any]]:
        params = {"select": "*", **self._params(filters, order)}
        response = self._request("GET", self._table_url(table), params=params, headers=self._headers())
        return self._rows(response)

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "POST",
            self._table_url(table),
            json=[row],
            headers=self._headers({"Prefer": "return=representation"}),
        )
        rows = self._rows(response)
        if len(rows) != 1:
            raise RemoteBackendError(f"Insert into {table} returned {len(rows)} rows")
        return rows[0]

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self._request(
            "PATCH",
            self._table_url(table),
            params=self._params(filters),
            json=values,
            headers=self._headers({"Prefer": "return=representation"}),
        )
        return self._rows(response)

    def delete(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self._request(
            "DELETE",
            self._table_url(table),
            params=self._params(filters),
            headers=self._headers({"Prefer": "return=representation"}),
        )
        return self._rows(response)

    # Storage

    def upload(self, bucket: str, path: str, content: bytes, content_type: str, cache_control: str = "3600", upsert: bool = False) -> None:
        self._request(
            "POST",
            f"{self.base_url}/storage/v1/object/{bucket}/{path}",
            data=content,
            headers=self._headers({
                "Content-Type": content_type,
                "cache-control": f"max-age={cache_control}",
                "x-upsert": "true" if upsert else "false",
            }),
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"
