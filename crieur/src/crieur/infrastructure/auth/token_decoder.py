"""
JWT decoding infrastructure for Crieur.

Reads access token claims without verifying the signature.
"""

import time
from typing import Optional

import jwt
from pydantic import ValidationError

from crieur.domain.auth import TokenClaims


class TokenDecoder:
    """
    Unverified JWT claim reader.

    Attributes:
        leeway_seconds: Tokens expiring within this margin count as expired
    """

    def __init__(self, leeway_seconds: int = 0):
        """
        Initialize token decoder.

        Args:
            leeway_seconds: Safety margin before 'exp' (default: 0)
        """
        self.leeway_seconds = leeway_seconds

    def decode(self, token: str) -> TokenClaims:
        """
        Decode token claims.

        Args:
            token: JWT string

        Returns:
            TokenClaims

        Raises:
            ValueError: If token is not a decodable JWT
        """
        try:
            payload = jwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_exp": False,
                    "verify_sub": False,
                },
            )
            return TokenClaims(**payload)
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {str(e)}")
        except ValidationError as e:
            raise ValueError(f"Invalid token claims: {str(e)}")

    def is_expired(self, token: Optional[str], now: Optional[float] = None) -> bool:
        """
        Check whether a token must be refreshed before use.

        Undecodable tokens count as expired. Tokens without an 'exp'
        claim never expire.

        Args:
            token: JWT string (None counts as expired)
            now: Unix time override

        Returns:
            True if the token is missing, undecodable or elapsed
        """
        if not token:
            return True
        try:
            claims = self.decode(token)
        except ValueError:
            return True

        if claims.exp is None:
            return False

        current = time.time() if now is None else now
        return claims.exp <= current + self.leeway_seconds

    def get_identity(self, token: Optional[str]) -> Optional[str]:
        """
        Read the identity claim.

        Returns:
            'sub' or 'user_id' claim, None if the token is undecodable
        """
        if not token:
            return None
        try:
            return self.decode(token).identity
        except ValueError:
            return None
