"""Protocol layer: JSON-RPC framing, lifecycle, transports and sessions."""

from mcp_filesystem.protocol.jsonrpc import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    format_error,
    format_notification,
    format_request,
    format_response,
    parse_message,
    parse_response,
)
from mcp_filesystem.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    SessionState,
)
from mcp_filesystem.protocol.session import ClientSession
from mcp_filesystem.protocol.tools import ToolsHandler, ToolsListResult
from mcp_filesystem.protocol.transport import (
    ClientTransport,
    InProcessTransport,
    StdioTransport,
    SubprocessTransport,
)

__all__ = [
    "ClientSession",
    "ClientTransport",
    "InProcessTransport",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "LifecycleManager",
    "MCP_PROTOCOL_VERSION",
    "SessionState",
    "StdioTransport",
    "SubprocessTransport",
    "ToolsHandler",
    "ToolsListResult",
    "format_error",
    "format_notification",
    "format_request",
    "format_response",
    "parse_message",
    "parse_response",
]
