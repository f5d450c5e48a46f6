"""WebSocket infrastructure."""

from crieur.infrastructure.websocket.connection_manager import (
    ConnectionManager,
    get_connection_manager,
    override_connection_manager,
    reset_connection_manager,
)
from crieur.infrastructure.websocket.socketio_transport import SocketIOTransport
from crieur.infrastructure.websocket.transport import Transport

__all__ = [
    "ConnectionManager",
    "SocketIOTransport",
    "Transport",
    "get_connection_manager",
    "override_connection_manager",
    "reset_connection_manager",
]
