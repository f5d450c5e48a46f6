"""
Credential value object - access/refresh token pair.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Credential:
    """
    Access and refresh token pair backing a channel.

    Expiry is never stored: it is read from the access token's claims.
    """

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token)

    def rotated(
        self, access_token: str, refresh_token: Optional[str] = None
    ) -> "Credential":
        """
        Build the credential that replaces this one after a refresh.

        The refresh token is kept when the server did not rotate it.
        """
        return Credential(
            access_token=access_token,
            refresh_token=refresh_token or self.refresh_token,
        )

    def __repr__(self) -> str:
        # Never print raw tokens
        access = "set" if self.has_access_token else "missing"
        refresh = "set" if self.has_refresh_token else "missing"
        return f"Credential(access_token={access}, refresh_token={refresh})"
