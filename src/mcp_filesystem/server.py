"""Filesystem tool server.

Integrates the lifecycle, the tool catalog and the dispatcher behind a
single handle_message entry point that maps one JSON-RPC line to at
most one response line.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from mcp_filesystem.audit import AuditLogger
from mcp_filesystem.config import AppConfig
from mcp_filesystem.exceptions import NotConnectedError, ProtocolError
from mcp_filesystem.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    format_error,
    format_response,
    parse_message,
)
from mcp_filesystem.protocol.lifecycle import LifecycleManager, SessionState
from mcp_filesystem.protocol.tools import InvalidCallParams, ToolsHandler, parse_call_params
from mcp_filesystem.tools.base import ToolProvider
from mcp_filesystem.tools.dispatcher import ToolDispatcher
from mcp_filesystem.tools.filesystem import FilesystemTools
from mcp_filesystem.tools.registry import ToolRegistry


class MCPServer:
    """Tool-call server.

    Provides:
    - Lifecycle management (initialize/initialized/ping)
    - Tool listing and execution
    - Optional audit logging of tool calls
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        providers: Iterable[ToolProvider] | None = None,
        log: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Application configuration (defaults apply when omitted).
            providers: Tool providers; the filesystem tools when omitted.
            log: Optional sink for diagnostic messages.
        """
        self._config = config or AppConfig()
        self._log = log

        if self._config.audit.log_file:
            self._audit: AuditLogger | None = AuditLogger(Path(self._config.audit.log_file))
        else:
            self._audit = None

        if providers is None:
            providers = [FilesystemTools()]

        self._lifecycle = LifecycleManager(server_info=self._config.server.server_info())
        self._registry = ToolRegistry(providers)
        self._dispatcher = ToolDispatcher(self._registry, log=log)
        self._tools_handler = ToolsHandler(self._dispatcher, audit=self._audit)

    @property
    def state(self) -> SessionState:
        return self._lifecycle.state

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions.
        """
        return self._tools_handler.handle_list().tools

    def handle_message(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string or None for notifications.
        """
        try:
            message = parse_message(raw_message)
        except JsonRpcError as e:
            return format_error(None, e.code, str(e))

        if isinstance(message, JsonRpcNotification):
            return self._handle_notification(message)
        else:
            return self._handle_request(message)

    def _handle_notification(self, notification: JsonRpcNotification) -> None:
        """Handle a notification (no response).

        Args:
            notification: The notification to handle.
        """
        if notification.method == "notifications/initialized":
            try:
                self._lifecycle.handle_initialized()
            except ProtocolError as e:
                self._emit(f"Ignoring initialized notification: {e}")
        # Other notifications are silently ignored
        return None

    def _handle_request(self, request: JsonRpcRequest) -> str:
        """Handle a request and return response.

        Args:
            request: The request to handle.

        Returns:
            JSON-RPC response string.
        """
        method = request.method
        params = request.params or {}
        msg_id = request.id

        if self._lifecycle.state == SessionState.CLOSED:
            return format_error(msg_id, INTERNAL_ERROR, "Connection is closed")

        # Initialize is special - allowed before ready
        if method == "initialize":
            try:
                result = self._lifecycle.handle_initialize(params)
                if self._lifecycle.client_info:
                    self._emit(f"Client connected: {self._lifecycle.client_info.get('name')}")
                return format_response(msg_id, result)
            except ProtocolError as e:
                return format_error(msg_id, INVALID_REQUEST, str(e))

        if method == "ping":
            return format_response(msg_id, {})

        # All other methods require ready state
        try:
            self._lifecycle.require_ready()
        except NotConnectedError as e:
            return format_error(msg_id, INTERNAL_ERROR, str(e))

        if method == "tools/list":
            result = self._tools_handler.handle_list()
            return format_response(msg_id, result.to_dict())

        elif method == "tools/call":
            try:
                call = parse_call_params(params)
            except InvalidCallParams as e:
                return format_error(msg_id, INVALID_PARAMS, str(e))
            result = self._tools_handler.handle_call(call)
            return format_response(msg_id, result.to_dict())

        else:
            return format_error(msg_id, METHOD_NOT_FOUND, f"Unknown method: {method}")

    def close(self) -> None:
        """Close the server and release the audit log."""
        self._lifecycle.handle_close()
        if self._audit is not None:
            self._audit.close()

    def _emit(self, message: str) -> None:
        if self._log is not None:
            self._log(message)

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
