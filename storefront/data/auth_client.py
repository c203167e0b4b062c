"""Hosted auth provider, reduced to what the storefront reads.

Sign-in itself (email/password, phone OTP, OAuth) happens between the browser
and the provider; the backend only resolves an access token to a user and
revokes it on sign-out.
"""
from typing import Optional

import requests

from ..app.config import BackendConfig, Config
from ..schemas.io_models import AuthUser
from ..utils.logger import get_logger

logger = get_logger("auth")


class AuthClient:
    def __init__(self, config: BackendConfig, timeout: float = None, session: requests.Session = None):
        self.config = config
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.http = session or requests.Session()

    def _headers(self, access_token: str):
        return {
            "apikey": self.config.key,
            "Authorization": f"Bearer {access_token}",
        }

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve ``access_token`` to the current user, or None."""
        if not access_token or not self.config.is_remote_configured():
            return None
        try:
            resp = self.http.get(
                f"{self.config.url.rstrip('/')}/auth/v1/user",
                headers=self._headers(access_token),
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                logger.info("Auth provider rejected token (status %s)", resp.status_code)
                return None
            return AuthUser.model_validate(resp.json())
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Auth provider lookup failed: %s", e)
            return None

    def sign_out(self, access_token: str) -> bool:
        if not access_token or not self.config.is_remote_configured():
            return False
        try:
            resp = self.http.post(
                f"{self.config.url.rstrip('/')}/auth/v1/logout",
                headers=self._headers(access_token),
                timeout=self.timeout,
            )
            return resp.status_code < 400
        except requests.exceptions.RequestException as e:
            logger.warning("Auth provider sign-out failed: %s", e)
            return False
