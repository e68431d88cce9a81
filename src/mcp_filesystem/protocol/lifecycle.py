"""Connection lifecycle.

Both peers move through the same states. On the server, the
initialize request enters CONNECTING and the initialized notification
enters READY; the client session follows the same path from its side
of the handshake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mcp_filesystem import __version__
from mcp_filesystem.exceptions import NotConnectedError, ProtocolError

# Version advertised when the client does not ask for one
MCP_PROTOCOL_VERSION = "2024-11-05"


class SessionState(Enum):
    """Connection lifecycle states."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"


def require_ready(state: SessionState) -> None:
    """Assert that calls may be issued in ``state``.

    Raises:
        NotConnectedError: If the state is anything but READY.
    """
    if state == SessionState.CLOSED:
        raise NotConnectedError("Connection is closed")
    if state != SessionState.READY:
        raise NotConnectedError("Client not connected")


@dataclass
class LifecycleManager:
    """Server-side lifecycle.

    Handles the initialization handshake and tracks connection state.
    """

    server_info: dict[str, str] = field(
        default_factory=lambda: {"name": "mcp-filesystem", "version": __version__}
    )
    capabilities: dict[str, Any] = field(default_factory=lambda: {"tools": {}})
    state: SessionState = SessionState.DISCONNECTED
    client_info: dict[str, str] | None = None
    client_capabilities: dict[str, Any] | None = None

    @property
    def is_ready(self) -> bool:
        """Check if the connection is ready for operations."""
        return self.state == SessionState.READY

    def require_ready(self) -> None:
        """Assert that the connection is ready.

        Raises:
            NotConnectedError: If not ready for operations.
        """
        require_ready(self.state)

    def handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle initialize request.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.

        Raises:
            ProtocolError: If the handshake already started.
        """
        if self.state != SessionState.DISCONNECTED:
            raise ProtocolError("Server already initialized")

        # Echo whatever version the client asks for
        negotiated_version = params.get("protocolVersion", MCP_PROTOCOL_VERSION)

        self.client_info = params.get("clientInfo")
        self.client_capabilities = params.get("capabilities", {})
        self.state = SessionState.CONNECTING

        return {
            "protocolVersion": negotiated_version,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info,
        }

    def handle_initialized(self) -> None:
        """Handle initialized notification.

        Raises:
            ProtocolError: If not in connecting state.
        """
        if self.state != SessionState.CONNECTING:
            raise ProtocolError("Server not initializing")

        self.state = SessionState.READY

    def handle_close(self) -> None:
        """Mark the connection closed; terminal."""
        self.state = SessionState.CLOSED
