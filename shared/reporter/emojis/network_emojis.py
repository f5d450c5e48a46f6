"""
Network operations emoji definitions.

Covers socket connection lifecycle, HTTP calls and data flow.

Usage:
    >>> from shared.reporter.emojis import NetworkEmoji
    >>> print(f"{NetworkEmoji.CONNECTED} Channel connected")
    🔗 Channel connected
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class NetworkEmoji(ComponentEmoji):
    """Socket lifecycle and network traffic."""

    # ============================================================
    # Connection States
    # ============================================================

    CONNECTED = "🔗"  # Connection established
    DISCONNECT = "🔌"  # Connection closed on purpose
    DISCONNECTED = "⚠️"  # Connection lost
    CONNECTING = "⏳"  # Connection in progress
    RECONNECTING = "🔄"  # Reconnection with new credential
    FAILED = "⛔"  # Connection failed

    # ============================================================
    # Data Flow
    # ============================================================

    SEND = "📤"  # Data sent
    RECEIVE = "📥"  # Data received
    BROADCAST = "📡"  # Fan-out to subscribers

    # ============================================================
    # Protocol Types
    # ============================================================

    WEBSOCKET = "🌐"  # Socket operation
    HTTP = "🔌"  # HTTP/REST call
