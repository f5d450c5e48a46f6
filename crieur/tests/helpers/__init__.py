"""
Test helper utilities.

Contains shared utilities for tests:
- tokens: signed JWT factory
- fakes: in-memory socket transport
- refresh_server: httpx MockTransport for the refresh endpoint
"""

from helpers.fakes import FakeTransport, FakeTransportFactory
from helpers.refresh_server import RefreshServer
from helpers.tokens import make_token

__all__ = ["FakeTransport", "FakeTransportFactory", "RefreshServer", "make_token"]
