"""Tool descriptors, call envelopes and the provider interface.

A ToolProvider contributes a fixed list of Tools. Each Tool pairs an
advertised ToolDefinition with a handler; handlers are only ever invoked
through Tool.invoke, which turns any exception into an Outcome so the
dispatcher deals with values rather than exceptions.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

TEXT = "text"


def text_block(text: str) -> dict[str, Any]:
    """Build a text content block."""
    return {"type": TEXT, "text": text}


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool as advertised in the catalog."""

    name: str
    description: str
    input_schema: dict[str, Any]

    @property
    def required(self) -> tuple[str, ...]:
        """Names of the arguments the schema marks as required."""
        return tuple(self.input_schema.get("required", ()))

    def missing_arguments(self, arguments: Mapping[str, Any]) -> list[str]:
        """Return required argument names absent from ``arguments``."""
        return [name for name in self.required if name not in arguments]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolDefinition:
        """Build a definition from its tools/list representation."""
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            input_schema=dict(data.get("inputSchema", {})),
        )


@dataclass(frozen=True)
class CallRequest:
    """One invocation of a tool by name."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_params(self) -> dict[str, Any]:
        """Convert to tools/call params."""
        return {"name": self.tool_name, "arguments": dict(self.arguments)}


@dataclass
class CallResult:
    """Result of a tool call.

    A result is a success unless ``is_error`` is set; failures carry the
    error text as their content.
    """

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> CallResult:
        return cls(content=[text_block(text)])

    @classmethod
    def failure(cls, text: str) -> CallResult:
        return cls(content=[text_block(text)], is_error=True)

    @property
    def text(self) -> str:
        """Text of all text blocks, newline-joined."""
        return "\n".join(block["text"] for block in self.content if block.get("type") == TEXT)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CallResult:
        """Build a result from its tools/call representation."""
        return cls(
            content=list(data.get("content", [])),
            is_error=bool(data.get("isError", False)),
        )


@dataclass(frozen=True)
class Outcome:
    """Value-or-error returned by a capability invocation."""

    value: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: str) -> Outcome:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> Outcome:
        return cls(error=error)


def capture(func: Callable[..., str], *args: Any, **kwargs: Any) -> Outcome:
    """Run ``func`` and wrap its return value or raised exception.

    Args:
        func: Callable producing a confirmation message.

    Returns:
        Outcome holding the message, or the exception text on failure.
    """
    try:
        return Outcome.success(func(*args, **kwargs))
    except Exception as e:
        return Outcome.failure(str(e) or type(e).__name__)


@dataclass(frozen=True)
class Tool:
    """A definition bound to the handler that implements it."""

    definition: ToolDefinition
    handler: Callable[[dict[str, Any]], str]

    @property
    def name(self) -> str:
        return self.definition.name

    def invoke(self, arguments: dict[str, Any]) -> Outcome:
        return capture(self.handler, arguments)


class ToolProvider(ABC):
    """Abstract base class for a group of tools.

    Providers are read once, when the registry is built.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider identifier."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Return the provider version."""
        pass

    @abstractmethod
    def get_tools(self) -> list[Tool]:
        """Return the tools provided, in advertisement order."""
        pass
