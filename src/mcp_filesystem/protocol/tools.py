"""tools/list and tools/call handlers.

Translates protocol params into CallRequests for the dispatcher and
records each call in the audit log when one is configured.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any

from mcp_filesystem.audit import AuditLogger
from mcp_filesystem.tools.base import CallRequest, CallResult
from mcp_filesystem.tools.dispatcher import ToolDispatcher


class InvalidCallParams(ValueError):
    """Raised when tools/call params are malformed."""

    pass


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {"tools": self.tools}


def parse_call_params(params: dict[str, Any]) -> CallRequest:
    """Build a CallRequest from tools/call params.

    Raises:
        InvalidCallParams: If name is not a string or arguments is not an object.
    """
    name = params.get("name")
    if not isinstance(name, str):
        raise InvalidCallParams("Invalid params: name must be a string")

    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidCallParams("Invalid params: arguments must be an object")

    return CallRequest(tool_name=name, arguments=arguments)


class ToolsHandler:
    """Handles tools/list and tools/call requests."""

    def __init__(self, dispatcher: ToolDispatcher, audit: AuditLogger | None = None) -> None:
        """Initialize the handler.

        Args:
            dispatcher: Tool dispatcher for routing calls.
            audit: Optional audit log for call records.
        """
        self._dispatcher = dispatcher
        self._audit = audit

    def handle_list(self) -> ToolsListResult:
        """Handle tools/list request.

        Returns:
            ToolsListResult with the full catalog.
        """
        tools = [tool.to_dict() for tool in self._dispatcher.registry.describe()]
        return ToolsListResult(tools=tools)

    def handle_call(self, request: CallRequest) -> CallResult:
        """Handle tools/call request.

        Args:
            request: The call to execute.

        Returns:
            CallResult from the dispatcher.
        """
        if self._audit is None:
            return self._dispatcher.handle(request)

        request_id = uuid.uuid4().hex
        self._audit.log_request(request_id, request.tool_name, request.arguments)
        started = time.perf_counter()
        result = self._dispatcher.handle(request)
        duration_ms = (time.perf_counter() - started) * 1000
        self._audit.log_response(
            request_id, "error" if result.is_error else "success", round(duration_ms, 3)
        )
        return result
