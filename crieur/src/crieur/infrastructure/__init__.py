"""
Infrastructure layer.

Concrete implementations backed by python-socketio, httpx and PyJWT.
"""

from crieur.infrastructure.auth import RefreshClient, TokenDecoder, TokenGuard
from crieur.infrastructure.storage import (
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)
from crieur.infrastructure.websocket import ConnectionManager, SocketIOTransport

__all__ = [
    "ConnectionManager",
    "CredentialStore",
    "FileCredentialStore",
    "InMemoryCredentialStore",
    "RefreshClient",
    "SocketIOTransport",
    "TokenDecoder",
    "TokenGuard",
]
