"""
Token refresh HTTP client.

Exchanges a refresh token for a new access token against the backend's
REST auth endpoint.
"""

from typing import Optional

import httpx
from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.domain.exceptions import RefreshFailedError
from crieur.domain.value_objects import Credential


class RefreshClient:
    """
    HTTP client for POST {server_url}{refresh_path}.

    Request body is {"refreshToken": ...}; the response must contain
    "accessToken" and may contain a rotated "refreshToken".

    Attributes:
        server_url: Backend base URL
        refresh_path: Refresh endpoint path
        timeout: HTTP request timeout in seconds
    """

    def __init__(
        self,
        server_url: str,
        refresh_path: str = "/auth/refresh",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize refresh client.

        Args:
            server_url: Backend base URL (e.g. "http://localhost:3000/api")
            refresh_path: Endpoint path
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
            reporter: Optional SystemReporter
        """
        self.server_url = server_url.rstrip("/")
        self.refresh_path = refresh_path
        self.timeout = timeout
        self.transport = transport
        self.reporter = reporter

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def url(self) -> str:
        return f"{self.server_url}{self.refresh_path}"

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Get or create async HTTP client.

        Returns:
            Async HTTP client instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def refresh(self, refresh_token: str) -> Credential:
        """
        Exchange a refresh token.

        Args:
            refresh_token: Stored refresh token

        Returns:
            Credential with the new access token and the rotated refresh
            token (or the old one when the server did not rotate it)

        Raises:
            RefreshFailedError: On network error, non-2xx status or a
                response without an access token
        """
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.AUTH.REFRESH} POST {self.url}",
                context="RefreshClient",
            )

        try:
            response = await self.client.post(
                self.url, json={"refreshToken": refresh_token}
            )
        except httpx.TimeoutException:
            raise RefreshFailedError("Refresh request timed out")
        except httpx.HTTPError as e:
            raise RefreshFailedError(f"Refresh request failed: {e}")

        if response.status_code >= 400:
            raise RefreshFailedError(
                f"Refresh rejected: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise RefreshFailedError(
                "Refresh response is not JSON", status_code=response.status_code
            )

        access_token = data.get("accessToken") if isinstance(data, dict) else None
        if not access_token or not isinstance(access_token, str):
            raise RefreshFailedError(
                "Refresh response has no accessToken",
                status_code=response.status_code,
            )

        rotated = data.get("refreshToken")
        if not isinstance(rotated, str) or not rotated:
            rotated = None

        return Credential(refresh_token=refresh_token).rotated(access_token, rotated)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
