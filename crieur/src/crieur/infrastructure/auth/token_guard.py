"""
Token guard: yields a usable access token, refreshing it when needed.
"""

import asyncio
from typing import Optional

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.domain.exceptions import (
    CredentialMissingError,
    RefreshFailedError,
    TokenExpiredError,
)
from crieur.domain.value_objects import Credential
from crieur.infrastructure.auth.refresh_client import RefreshClient
from crieur.infrastructure.auth.token_decoder import TokenDecoder
from crieur.infrastructure.storage import CredentialStore


class TokenGuard:
    """
    Resolves a valid access token before a channel is opened.

    Refresh is single-flight: while a refresh is outstanding every caller
    awaits the same task, so exactly one request reaches the backend.
    Credential problems are never raised to callers; they resolve to None.

    Attributes:
        store: Persisted credential store
        refresh_client: REST refresh client
        decoder: JWT claim reader
        access_token_key: Store key of the access token
        refresh_token_key: Store key of the refresh token
        refresh_count: Number of refresh requests issued
    """

    def __init__(
        self,
        store: CredentialStore,
        refresh_client: RefreshClient,
        decoder: Optional[TokenDecoder] = None,
        access_token_key: str = "auth_token",
        refresh_token_key: str = "refresh_token",
        reporter: Optional[SystemReporter] = None,
    ):
        self.store = store
        self.refresh_client = refresh_client
        self.decoder = decoder or TokenDecoder()
        self.access_token_key = access_token_key
        self.refresh_token_key = refresh_token_key
        self.reporter = reporter

        self.refresh_count = 0
        self._lock = asyncio.Lock()
        self._inflight: Optional[asyncio.Task] = None

    async def load_credential(self) -> Credential:
        """Read the stored token pair without refreshing."""
        return Credential(
            access_token=await self.store.get(self.access_token_key),
            refresh_token=await self.store.get(self.refresh_token_key),
        )

    def _require_fresh(self, access_token: Optional[str]) -> str:
        """
        Validate a stored access token.

        Raises:
            CredentialMissingError: If no token is stored
            TokenExpiredError: If the token is elapsed or undecodable
        """
        if not access_token:
            raise CredentialMissingError("No access token stored")
        if self.decoder.is_expired(access_token):
            raise TokenExpiredError("Access token expired")
        return access_token

    async def resolve_valid_credential(self) -> Optional[str]:
        """
        Return a non-expired access token, refreshing if necessary.

        Returns:
            Access token, or None when no credential can be obtained
        """
        try:
            return self._require_fresh(await self.store.get(self.access_token_key))
        except (CredentialMissingError, TokenExpiredError) as e:
            if self.reporter:
                self.reporter.info(
                    f"{Emoji.AUTH.EXPIRED} {e}, refreshing",
                    context="TokenGuard",
                    verbose_level=2,
                )
        return await self.refresh()

    async def refresh(self, force: bool = False) -> Optional[str]:
        """
        Refresh the access token (single-flight).

        Args:
            force: Refresh even if the stored token is still valid

        Returns:
            New access token, or None if refresh was impossible or failed
        """
        async with self._lock:
            task = self._inflight
            if task is None:
                # A refresh may have completed while this caller waited
                current = await self.store.get(self.access_token_key)
                if not force and current and not self.decoder.is_expired(current):
                    return current

                task = asyncio.ensure_future(self._do_refresh())
                self._inflight = task
                task.add_done_callback(self._clear_inflight)
            elif self.reporter:
                self.reporter.debug(
                    f"{Emoji.AUTH.WAITING} Joining in-flight refresh",
                    context="TokenGuard",
                )

        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _do_refresh(self) -> Optional[str]:
        refresh_token = await self.store.get(self.refresh_token_key)
        if not refresh_token:
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.AUTH.MISSING} No refresh token stored",
                    context="TokenGuard",
                )
            return None

        self.refresh_count += 1
        try:
            credential = await self.refresh_client.refresh(refresh_token)
        except RefreshFailedError as e:
            await self.store.delete_many(
                [self.access_token_key, self.refresh_token_key]
            )
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.AUTH.REVOKED} Refresh failed ({e}), credentials cleared",
                    context="TokenGuard",
                )
            return None

        await self.store.set_many(
            {
                self.access_token_key: credential.access_token,
                self.refresh_token_key: credential.refresh_token,
            }
        )
        if self.reporter:
            self.reporter.info(
                f"{Emoji.AUTH.REFRESHED} Access token refreshed",
                context="TokenGuard",
            )
        return credential.access_token
