"""
Authentication domain models for Crieur.

Defines the access token claims read on the client side.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenClaims(BaseModel):
    """
    Access token claims relevant to the client.

    The signature is never verified client-side; claims are only used to
    predict expiry and to tell identities apart.

    Attributes:
        sub: Subject (user id) claim
        user_id: Alternate user id claim
        role: User role, if the backend includes it
        exp: Expiration time (Unix timestamp)
        iat: Issued at time (Unix timestamp)
    """

    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = Field(default=None, description="Subject claim")
    user_id: Optional[str] = Field(default=None, description="User ID claim")
    role: Optional[str] = Field(default=None, description="User role")
    exp: Optional[float] = Field(default=None, description="Expiration time")
    iat: Optional[float] = Field(default=None, description="Issued at time")

    @field_validator("sub", "user_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value):
        """Numeric ids are kept as their string form."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def identity(self) -> Optional[str]:
        """User identity ('sub' first, then 'user_id')."""
        value = self.sub or self.user_id
        return str(value) if value is not None else None

    @property
    def expires_at(self) -> Optional[datetime]:
        """Expiry as an aware datetime, None when the token has no 'exp'."""
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)
