"""Tool catalog, dispatch and the filesystem tool provider."""

from mcp_filesystem.tools.base import (
    CallRequest,
    CallResult,
    Outcome,
    Tool,
    ToolDefinition,
    ToolProvider,
    capture,
    text_block,
)
from mcp_filesystem.tools.dispatcher import ToolDispatcher
from mcp_filesystem.tools.filesystem import DirEntry, FilesystemCapabilities, FilesystemTools
from mcp_filesystem.tools.registry import ToolNotFoundError, ToolRegistry

__all__ = [
    "CallRequest",
    "CallResult",
    "DirEntry",
    "FilesystemCapabilities",
    "FilesystemTools",
    "Outcome",
    "Tool",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolNotFoundError",
    "ToolProvider",
    "ToolRegistry",
    "capture",
    "text_block",
]
