"""Filesystem tools served over a JSON-RPC stdio protocol, with a client."""

__version__ = "1.0.0"

from mcp_filesystem.client import FilesystemClient  # noqa: E402
from mcp_filesystem.exceptions import (  # noqa: E402
    CallInProgressError,
    CallTimeoutError,
    MCPFilesystemError,
    NotConnectedError,
    ProtocolError,
    RemoteError,
    TransportError,
)
from mcp_filesystem.server import MCPServer  # noqa: E402

__all__ = [
    "CallInProgressError",
    "CallTimeoutError",
    "FilesystemClient",
    "MCPFilesystemError",
    "MCPServer",
    "NotConnectedError",
    "ProtocolError",
    "RemoteError",
    "TransportError",
    "__version__",
]
