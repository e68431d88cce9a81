"""Filesystem tools: create, read, edit, delete, list and mkdir.

FilesystemCapabilities performs the actual I/O and raises OSError (or
TypeError for missing or non-path arguments) as the standard library
does. File descriptors are never accepted in place of a path.
FilesystemTools wraps each capability as a tool with a confirmation
message naming the affected path.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcp_filesystem.tools.base import Tool, ToolDefinition, ToolProvider

ENCODING = "utf-8"


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""

    name: str
    is_dir: bool

    def label(self) -> str:
        return f"{'[DIR]' if self.is_dir else '[FILE]'} {self.name}"


class FilesystemCapabilities:
    """Plain filesystem operations.

    Content is written and read with newline translation disabled, so
    what is written comes back unchanged.
    """

    def create(self, path: str, content: str) -> None:
        Path(os.fspath(path)).write_text(content, encoding=ENCODING, newline="")

    def read(self, path: str) -> str:
        with open(os.fspath(path), encoding=ENCODING, newline="") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        Path(os.fspath(path)).write_text(content, encoding=ENCODING, newline="")

    def delete(self, path: str) -> None:
        os.unlink(os.fspath(path))

    def list(self, dirpath: str) -> list[DirEntry]:
        with os.scandir(os.fspath(dirpath)) as entries:
            listing = [
                DirEntry(name=entry.name, is_dir=entry.is_dir(follow_symlinks=False))
                for entry in entries
            ]
        return sorted(listing, key=lambda entry: entry.name)

    def mkdir_recursive(self, path: str) -> None:
        os.makedirs(os.fspath(path), exist_ok=True)


def _schema(properties: dict[str, str]) -> dict[str, Any]:
    """Object schema whose properties are all required strings."""
    return {
        "type": "object",
        "properties": {
            name: {"type": "string", "description": description}
            for name, description in properties.items()
        },
        "required": list(properties),
    }


class FilesystemTools(ToolProvider):
    """Provider for the six filesystem tools.

    Tools are advertised in a fixed order: create_file, read_file,
    edit_file, delete_file, list_files, create_directory.
    """

    def __init__(self, capabilities: FilesystemCapabilities | None = None) -> None:
        self._fs = capabilities or FilesystemCapabilities()

    @property
    def name(self) -> str:
        return "filesystem"

    @property
    def version(self) -> str:
        return "1.0.0"

    def get_tools(self) -> list[Tool]:
        return [
            Tool(
                ToolDefinition(
                    name="create_file",
                    description="Create a new file with specified content",
                    input_schema=_schema(
                        {
                            "filepath": "Path where the file should be created",
                            "content": "Content to write to the file",
                        }
                    ),
                ),
                self._create_file,
            ),
            Tool(
                ToolDefinition(
                    name="read_file",
                    description="Read the contents of a file",
                    input_schema=_schema({"filepath": "Path of the file to read"}),
                ),
                self._read_file,
            ),
            Tool(
                ToolDefinition(
                    name="edit_file",
                    description="Edit an existing file by replacing its content",
                    input_schema=_schema(
                        {
                            "filepath": "Path of the file to edit",
                            "content": "New content for the file",
                        }
                    ),
                ),
                self._edit_file,
            ),
            Tool(
                ToolDefinition(
                    name="delete_file",
                    description="Delete a file",
                    input_schema=_schema({"filepath": "Path of the file to delete"}),
                ),
                self._delete_file,
            ),
            Tool(
                ToolDefinition(
                    name="list_files",
                    description="List all files in a directory",
                    input_schema=_schema({"dirpath": "Path of the directory to list"}),
                ),
                self._list_files,
            ),
            Tool(
                ToolDefinition(
                    name="create_directory",
                    description="Create a new directory",
                    input_schema=_schema(
                        {"dirpath": "Path where the directory should be created"}
                    ),
                ),
                self._create_directory,
            ),
        ]

    def _create_file(self, arguments: dict[str, Any]) -> str:
        filepath = arguments.get("filepath")
        self._fs.create(filepath, arguments.get("content"))
        return f"File created successfully at: {filepath}"

    def _read_file(self, arguments: dict[str, Any]) -> str:
        filepath = arguments.get("filepath")
        content = self._fs.read(filepath)
        return f"Content of {filepath}:\n\n{content}"

    def _edit_file(self, arguments: dict[str, Any]) -> str:
        filepath = arguments.get("filepath")
        self._fs.write(filepath, arguments.get("content"))
        return f"File edited successfully: {filepath}"

    def _delete_file(self, arguments: dict[str, Any]) -> str:
        filepath = arguments.get("filepath")
        self._fs.delete(filepath)
        return f"File deleted successfully: {filepath}"

    def _list_files(self, arguments: dict[str, Any]) -> str:
        dirpath = arguments.get("dirpath")
        listing = "\n".join(entry.label() for entry in self._fs.list(dirpath))
        return f"Contents of {dirpath}:\n\n{listing}"

    def _create_directory(self, arguments: dict[str, Any]) -> str:
        dirpath = arguments.get("dirpath")
        self._fs.mkdir_recursive(dirpath)
        return f"Directory created successfully: {dirpath}"
