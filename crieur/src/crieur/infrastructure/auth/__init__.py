"""Authentication infrastructure."""

from crieur.infrastructure.auth.refresh_client import RefreshClient
from crieur.infrastructure.auth.token_decoder import TokenDecoder
from crieur.infrastructure.auth.token_guard import TokenGuard

__all__ = ["RefreshClient", "TokenDecoder", "TokenGuard"]
