"""Tool registry - the static catalog advertised by the server."""

from __future__ import annotations

from collections.abc import Iterable

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from mcp_filesystem.exceptions import RegistryError
from mcp_filesystem.tools.base import Tool, ToolDefinition, ToolProvider


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""

    pass


class ToolRegistry:
    """Immutable catalog of tools, built once from a set of providers.

    The catalog never changes after construction, so clients may cache
    it for the lifetime of a session.
    """

    def __init__(self, providers: Iterable[ToolProvider]) -> None:
        """Build the catalog.

        Args:
            providers: Tool providers, in advertisement order.

        Raises:
            RegistryError: On duplicate names or invalid input schemas.
        """
        tools: dict[str, Tool] = {}
        for provider in providers:
            for tool in provider.get_tools():
                if tool.name in tools:
                    raise RegistryError(
                        f"Duplicate tool name: {tool.name}",
                        details={"provider": provider.name},
                    )
                try:
                    Draft202012Validator.check_schema(tool.definition.input_schema)
                except SchemaError as e:
                    raise RegistryError(
                        f"Invalid input schema for {tool.name}: {e.message}"
                    ) from e
                tools[tool.name] = tool

        self._tools = tools
        self._catalog = tuple(tool.definition for tool in tools.values())

    def describe(self) -> list[ToolDefinition]:
        """Return the tool catalog in advertisement order."""
        return list(self._catalog)

    def resolve(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"Tool not found: {name}")
        return tool

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
