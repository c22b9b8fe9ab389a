"""
Supabase Auth API Connector

Email/password authentication against a Supabase project's GoTrue endpoint.
API Documentation: https://supabase.com/docs/reference/self-hosting-auth/introduction
"""

import requests
from typing import Dict, Optional
import logging
import os

from .exceptions import AuthProviderError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SupabaseAuthConnector:
    """Connector for the Supabase Auth (GoTrue) REST API"""

    AUTH_PATH = "/auth/v1"

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        redirect_to: Optional[str] = None,
        timeout: float = 10
    ):
        """
        Initialize Supabase auth connector

        Args:
            url: Project URL. If None, read from SUPABASE_URL
            anon_key: Public anon key. If None, read from SUPABASE_ANON_KEY
            redirect_to: Where confirmation emails send the user
            timeout: Request timeout in seconds
        """
        self.url = (url or os.getenv("SUPABASE_URL") or "").rstrip("/")
        self.anon_key = anon_key or os.getenv("SUPABASE_ANON_KEY")
        self.redirect_to = redirect_to or os.getenv("SUPABASE_REDIRECT_URL")
        self.timeout = timeout

        if not self.url or not self.anon_key:
            logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set - authentication will fail")

        self.session = requests.Session()
        if self.anon_key:
            self.session.headers.update({"apikey": self.anon_key})

    def sign_in_with_password(self, email: str, password: str) -> Dict:
        """
        Exchange email and password for a session

        Returns:
            Session payload with access_token, refresh_token and user
        """
        return self._request(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password}
        )

    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict:
        """
        Register a new account

        Returns:
            Session payload when the project signs users in directly, or the
            bare user when email confirmation is required
        """
        params = {"redirect_to": self.redirect_to} if self.redirect_to else None
        body = {"email": email, "password": password, "data": {"full_name": full_name} if full_name else {}}
        return self._request("POST", "/signup", params=params, json=body)

    def sign_out(self, access_token: str):
        self._request("POST", "/logout", access_token=access_token)

    def get_user(self, access_token: str) -> Dict:
        """Get the user owning an access token"""
        return self._request("GET", "/user", access_token=access_token)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None,
        access_token: Optional[str] = None
    ) -> Dict:
        if not self.url or not self.anon_key:
            raise AuthProviderError("Supabase URL and anon key must be configured")

        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None

        try:
            response = self.session.request(
                method,
                f"{self.url}{self.AUTH_PATH}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error reaching auth provider: {e}")
            raise AuthProviderError(f"Auth provider unreachable: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.error(f"Auth request {method} {path} failed ({response.status_code}): {message}")
            raise AuthProviderError(message, status_code=response.status_code)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise AuthProviderError("Auth provider returned malformed JSON") from e


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if not isinstance(data, dict):
        return f"HTTP {response.status_code}"
    return (
        data.get("error_description")
        or data.get("msg")
        or data.get("message")
        or data.get("error")
        or f"HTTP {response.status_code}"
    )
