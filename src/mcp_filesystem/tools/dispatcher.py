"""Tool dispatcher - routes tool calls to the registered implementation."""

from __future__ import annotations

from collections.abc import Callable

from mcp_filesystem.tools.base import CallRequest, CallResult
from mcp_filesystem.tools.registry import ToolNotFoundError, ToolRegistry


class ToolDispatcher:
    """Turns every CallRequest into exactly one CallResult.

    Unknown tools and failing capabilities are reported as failed
    results; nothing raised by a tool reaches the caller.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        log: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Catalog to resolve tool names against.
            log: Optional sink for diagnostic messages.
        """
        self._registry = registry
        self._log = log

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def handle(self, request: CallRequest) -> CallResult:
        """Dispatch a call.

        Args:
            request: The call to execute.

        Returns:
            Success with the tool's confirmation, or a failure describing
            the unknown tool or the capability error.
        """
        try:
            tool = self._registry.resolve(request.tool_name)
        except ToolNotFoundError:
            self._emit(f"Unknown tool requested: {request.tool_name}")
            return CallResult.failure(f"Unknown tool: {request.tool_name}")

        # Missing arguments are left for the capability to reject
        missing = tool.definition.missing_arguments(request.arguments)
        if missing:
            self._emit(f"{tool.name} called without required arguments: {', '.join(missing)}")

        outcome = tool.invoke(request.arguments)
        if not outcome.ok:
            self._emit(f"{tool.name} failed: {outcome.error}")
            return CallResult.failure(f"Error: {outcome.error}")

        return CallResult.success(outcome.value or "")

    def _emit(self, message: str) -> None:
        if self._log is not None:
            self._log(message)
