"""
Unit tests for TokenDecoder.

Tests claim decoding, expiry prediction and identity lookup.

Usage:
    pytest crieur/tests/unit/infrastructure/test_token_decoder.py
"""

import time

from helpers import make_token
from shared.tests import LaborantTest

from crieur.infrastructure.auth import TokenDecoder


class TestTokenDecoder(LaborantTest):
    """Unit tests for TokenDecoder."""

    component_name = "crieur"
    test_category = "unit"

    def setup(self):
        """Setup test fixtures."""
        self.reporter.info("Setting up TokenDecoder tests", context="Setup")
        self.decoder = TokenDecoder()

    # ================================================================
    # decode()
    # ================================================================

    def test_decode_claims(self):
        """Test decoding without the signing secret."""
        self.reporter.info("Testing claim decoding", context="Test")

        token = make_token(sub="user-7", role="SELLER")

        claims = self.decoder.decode(token)

        assert claims.sub == "user-7"
        assert claims.role == "SELLER"
        assert claims.identity == "user-7"
        assert claims.exp is not None
        assert claims.expires_at is not None
        self.reporter.info("Claims decoded", context="Test")

    def test_decode_user_id_identity(self):
        """Test identity falls back to user_id."""
        token = make_token(sub=None, user_id="42")

        assert self.decoder.decode(token).identity == "42"

    def test_decode_garbage_raises(self):
        """Test undecodable token raises ValueError."""
        try:
            self.decoder.decode("not-a-jwt")
            assert False, "Should have raised ValueError"
        except ValueError as e:
            assert "Invalid token" in str(e)

    # ================================================================
    # is_expired()
    # ================================================================

    def test_valid_token_not_expired(self):
        """Test token expiring in one hour."""
        assert not self.decoder.is_expired(make_token(expires_in=3600))

    def test_elapsed_token_expired(self):
        """Test token past its exp."""
        self.reporter.info("Testing expired token", context="Test")

        assert self.decoder.is_expired(make_token(expires_in=-60))

    def test_missing_and_garbage_tokens_expired(self):
        """Test None, empty and undecodable tokens."""
        assert self.decoder.is_expired(None)
        assert self.decoder.is_expired("")
        assert self.decoder.is_expired("garbage")

    def test_token_without_exp_never_expires(self):
        """Test token without exp claim."""
        token = make_token(expires_in=None)

        assert not self.decoder.is_expired(token)
        assert self.decoder.decode(token).expires_at is None

    def test_leeway(self):
        """Test tokens inside the leeway count as expired."""
        self.reporter.info("Testing expiry leeway", context="Test")

        token = make_token(expires_in=20)

        assert not TokenDecoder(leeway_seconds=0).is_expired(token)
        assert TokenDecoder(leeway_seconds=30).is_expired(token)

    def test_now_override(self):
        """Test explicit clock."""
        token = make_token(expires_in=100)

        assert self.decoder.is_expired(token, now=time.time() + 200)
        assert not self.decoder.is_expired(token, now=time.time())

    # ================================================================
    # get_identity()
    # ================================================================

    def test_get_identity(self):
        """Test identity lookup."""
        assert self.decoder.get_identity(make_token(sub="a")) == "a"
        assert self.decoder.get_identity(None) is None
        assert self.decoder.get_identity("garbage") is None

    # ================================================================
    # Claim shapes
    # ================================================================

    def test_numeric_subject(self):
        """Test an integer sub decodes as its string form."""
        token = make_token(sub=42)

        assert self.decoder.decode(token).sub == "42"
        assert self.decoder.get_identity(token) == "42"
        assert not self.decoder.is_expired(token)

    def test_numeric_user_id(self):
        """Test an integer user_id decodes as its string form."""
        token = make_token(sub=None, user_id=7)

        assert self.decoder.get_identity(token) == "7"

    def test_fractional_exp(self):
        """Test a NumericDate with a fractional part."""
        token = make_token(expires_in=3600.5)

        claims = self.decoder.decode(token)

        assert claims.exp % 1 == 0.5
        assert claims.expires_at is not None
        assert not self.decoder.is_expired(token)
        assert self.decoder.is_expired(make_token(expires_in=-0.5))


if __name__ == "__main__":
    TestTokenDecoder.run_as_main()
