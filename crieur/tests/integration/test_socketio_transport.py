"""
Integration tests for SocketIOTransport.

The python-socketio AsyncClient is replaced by a mock so the tests check
how the transport drives it and how it translates its callbacks.

Usage:
    pytest crieur/tests/integration/test_socketio_transport.py
"""

import asyncio
from unittest.mock import AsyncMock, Mock

from shared.tests import LaborantTest
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from crieur.domain.exceptions import ChannelConnectionError, HandshakeRejectedError
from crieur.infrastructure.websocket import SocketIOTransport

URL = "http://crieur-test.local"
NAMESPACE = "/notifications"


class TestSocketIOTransport(LaborantTest):
    """Integration tests for SocketIOTransport over a mocked AsyncClient."""

    component_name = "crieur"
    test_category = "integration"

    def setup_test(self):
        self.handlers = {}
        self.client = Mock()
        self.client.connected = False
        self.client.connect = AsyncMock()
        self.client.disconnect = AsyncMock()
        self.client.emit = AsyncMock()
        self.client.on = Mock(side_effect=self._register)
        self.factory = Mock(return_value=self.client)

        self.events = []
        self.lifecycle = []
        self.transport = SocketIOTransport(
            URL,
            NAMESPACE,
            "token-1",
            connect_timeout=5.0,
            reporter=self.reporter,
            client_factory=self.factory,
        )
        self.transport.set_handlers(
            lambda event, payload: self.events.append((event, payload)),
            lambda: self.lifecycle.append("connect"),
            lambda reason: self.lifecycle.append(("disconnect", reason)),
            lambda data: self.lifecycle.append(("connect_error", data)),
        )

    def _register(self, event, handler, namespace=None):
        self.handlers[(event, namespace)] = handler

    # ================================================================
    # Construction
    # ================================================================

    def test_client_built_without_auto_reconnect(self):
        """Test AsyncClient options."""
        self.factory.assert_called_once_with(
            reconnection=False, logger=False, engineio_logger=False
        )

    def test_handlers_registered_on_namespace(self):
        """Test connect/disconnect/connect_error/catch-all handlers."""
        registered = {event for event, ns in self.handlers if ns == NAMESPACE}

        assert registered == {"connect", "disconnect", "connect_error", "*"}

    # ================================================================
    # connect()
    # ================================================================

    async def test_connect_arguments(self):
        """Test handshake auth, transports and namespace."""
        self.reporter.info("Testing connect arguments", context="Test")

        await self.transport.connect()

        self.client.connect.assert_awaited_once_with(
            URL,
            auth={"token": "token-1"},
            transports=["websocket"],
            namespaces=[NAMESPACE],
            wait_timeout=5.0,
        )

    async def test_network_failure(self):
        """Test socketio ConnectionError becomes ChannelConnectionError."""
        self.client.connect.side_effect = SocketIOConnectionError(
            "Cannot connect to host"
        )

        try:
            await self.transport.connect()
            assert False, "Should have raised ChannelConnectionError"
        except HandshakeRejectedError:
            assert False, "Network failure is not a rejection"
        except ChannelConnectionError as e:
            assert "Cannot connect to host" in e.reason
            assert e.url == f"{URL}{NAMESPACE}"

    async def test_timeout_failure(self):
        """Test handshake timeout."""
        self.client.connect.side_effect = asyncio.TimeoutError()

        try:
            await self.transport.connect()
            assert False, "Should have raised ChannelConnectionError"
        except ChannelConnectionError as e:
            assert e.reason == "TimeoutError"

    async def test_rejected_handshake(self):
        """Test connect_error before the failure marks a rejection."""
        self.reporter.info("Testing rejected handshake", context="Test")

        connect_error = self.handlers[("connect_error", NAMESPACE)]

        async def reject(*args, **kwargs):
            await connect_error({"message": "Unauthorized"})
            raise SocketIOConnectionError("One or more namespaces failed to connect")

        self.client.connect.side_effect = reject

        try:
            await self.transport.connect()
            assert False, "Should have raised HandshakeRejectedError"
        except HandshakeRejectedError as e:
            assert e.reason == "Unauthorized"

        assert self.lifecycle == [("connect_error", {"message": "Unauthorized"})]

    # ================================================================
    # Inbound callbacks
    # ================================================================

    async def test_catch_all_forwards_events(self):
        """Test '*' handler payload handling."""
        catch_all = self.handlers[("*", NAMESPACE)]

        await catch_all("newOrder", {"orderId": "1"})
        await catch_all("ping")
        await catch_all("pair", 1, 2)

        assert self.events == [
            ("newOrder", {"orderId": "1"}),
            ("ping", None),
            ("pair", [1, 2]),
        ]

    async def test_connect_and_disconnect_callbacks(self):
        """Test lifecycle forwarding."""
        await self.handlers[("connect", NAMESPACE)]()
        await self.handlers[("disconnect", NAMESPACE)]("transport close")
        await self.handlers[("disconnect", NAMESPACE)]()

        assert self.lifecycle == [
            "connect",
            ("disconnect", "transport close"),
            ("disconnect", None),
        ]

    # ================================================================
    # Outbound
    # ================================================================

    async def test_emit_and_disconnect(self):
        """Test emit targets the namespace."""
        self.client.connected = True
        assert self.transport.connected

        await self.transport.emit("markAsRead", {"notificationId": "n1"})
        await self.transport.disconnect()

        self.client.emit.assert_awaited_once_with(
            "markAsRead", {"notificationId": "n1"}, namespace=NAMESPACE
        )
        self.client.disconnect.assert_awaited_once()


if __name__ == "__main__":
    TestSocketIOTransport.run_as_main()
