"""Exceptions raised by the filesystem tool server and client.

Tool-level problems (unknown tools, failing filesystem operations) never
surface as exceptions to a caller; they are reported inside a CallResult.
The classes below cover connection misuse, transport breakage and
configuration problems.
"""

from __future__ import annotations

from typing import Any


class MCPFilesystemError(Exception):
    """Base exception for mcp-filesystem."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotConnectedError(MCPFilesystemError):
    """Raised when an operation is attempted outside the READY state."""

    def __init__(self, message: str = "Client not connected"):
        super().__init__(message)


class ProtocolError(MCPFilesystemError):
    """Raised when lifecycle or message constraints are violated."""

    pass


class TransportError(MCPFilesystemError):
    """Raised when the byte stream breaks or the peer process exits."""

    pass


class CallInProgressError(MCPFilesystemError):
    """Raised when a request is issued while another is still pending."""

    def __init__(self, pending_id: int):
        super().__init__(
            f"Request {pending_id} is still in flight",
            details={"pending_id": pending_id},
        )
        self.pending_id = pending_id


class CallTimeoutError(MCPFilesystemError, TimeoutError):
    """Raised when the server does not answer within the call timeout."""

    def __init__(self, method: str, timeout: float):
        super().__init__(
            f"No response to '{method}' within {timeout}s",
            details={"method": method, "timeout": timeout},
        )
        self.timeout = timeout


class RemoteError(MCPFilesystemError):
    """Raised when the server answers with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any | None = None):
        super().__init__(f"RPC error {code}: {message}", details={"code": code})
        self.code = code
        self.remote_message = message
        self.data = data


class ConfigError(MCPFilesystemError):
    """Raised when configuration cannot be loaded."""

    pass


class RegistryError(MCPFilesystemError):
    """Raised when the tool catalog cannot be built."""

    pass
