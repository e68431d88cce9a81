"""Tests for the FilesystemClient facade."""

import asyncio
from pathlib import Path

import pytest

from mcp_filesystem.client import FilesystemClient
from mcp_filesystem.commands import HELP_TEXT
from mcp_filesystem.config import ClientConfig
from mcp_filesystem.exceptions import NotConnectedError, ProtocolError
from mcp_filesystem.protocol.transport import InProcessTransport
from mcp_filesystem.server import MCPServer


@pytest.fixture
def client(workspace: Path) -> FilesystemClient:
    """Client wired to an embedded server, resolving prompts in the workspace."""
    config = ClientConfig(working_directory=str(workspace))
    return FilesystemClient(config, transport=InProcessTransport(MCPServer()))


def run(client: FilesystemClient, scenario):
    async def wrapped():
        async with client:
            return await scenario(client)

    return asyncio.run(wrapped())


class TestToolMethods:
    """Tests for the typed per-tool methods."""

    def test_file_lifecycle(self, client: FilesystemClient, workspace: Path):
        """Should create, edit, read and delete a file."""
        path = str(workspace / "notes.txt")

        async def scenario(c):
            created = await c.create_file(path, "first")
            edited = await c.edit_file(path, "second")
            read = await c.read_file(path)
            deleted = await c.delete_file(path)
            return created, edited, read, deleted

        created, edited, read, deleted = run(client, scenario)

        assert created.text == f"File created successfully at: {path}"
        assert edited.text == f"File edited successfully: {path}"
        assert read.text == f"Content of {path}:\n\nsecond"
        assert deleted.text == f"File deleted successfully: {path}"
        assert not Path(path).exists()

    def test_directories(self, client: FilesystemClient, workspace: Path):
        """Should create a directory and show it in a listing."""

        async def scenario(c):
            await c.create_directory(str(workspace / "docs" / "drafts"))
            return await c.list_files(str(workspace))

        result = run(client, scenario)

        assert result.text == f"Contents of {workspace}:\n\n[DIR] docs"

    def test_failure_is_a_value(self, client: FilesystemClient, workspace: Path):
        """Should return failures instead of raising and stay connected."""

        async def scenario(c):
            failed = await c.delete_file(str(workspace / "ghost.txt"))
            connected = c.is_connected
            listing = await c.list_files(str(workspace))
            return failed, connected, listing

        result, connected, listing = run(client, scenario)

        assert result.is_error
        assert result.text.startswith("Error: ")
        assert connected
        assert not listing.is_error

    def test_unknown_tool(self, client: FilesystemClient):
        """Should surface the server's unknown-tool text."""

        async def scenario(c):
            return await c.call("rename_file", {})

        result = run(client, scenario)

        assert result.is_error
        assert result.text == "Unknown tool: rename_file"

    def test_list_tools(self, client: FilesystemClient):
        """Should expose the tool catalog."""

        async def scenario(c):
            return await c.list_tools()

        assert len(run(client, scenario)) == 6


class TestConnection:
    """Tests for connection state handling."""

    def test_call_before_connect(self):
        """Should raise NotConnectedError."""
        with pytest.raises(NotConnectedError):
            asyncio.run(FilesystemClient().read_file("a.txt"))

    def test_call_after_disconnect(self, client: FilesystemClient):
        """Should raise NotConnectedError once disconnected."""

        async def scenario():
            await client.connect()
            await client.disconnect()
            await client.read_file("a.txt")

        with pytest.raises(NotConnectedError):
            asyncio.run(scenario())

        assert not client.is_connected

    def test_connect_twice(self, client: FilesystemClient):
        """Should refuse a second connect while connected."""

        async def scenario():
            await client.connect()
            await client.connect()

        with pytest.raises(ProtocolError, match="already connected"):
            asyncio.run(scenario())


class TestProcessPrompt:
    """Tests for plain-English commands."""

    def test_create_from_prompt(self, client: FilesystemClient, workspace: Path):
        """Should resolve the file name against the working directory."""

        async def scenario(c):
            return await c.process_prompt("create file a.txt with content hello")

        result = run(client, scenario)

        assert result.text == f"File created successfully at: {workspace}/a.txt"
        assert (workspace / "a.txt").read_text() == "hello"

    def test_explicit_working_directory(self, client: FilesystemClient, workspace: Path):
        """Should prefer the working directory passed in."""
        other = workspace / "other"
        other.mkdir()
        (other / "b.txt").write_text("x")

        async def scenario(c):
            return await c.process_prompt("list files", str(other))

        assert run(client, scenario).text == f"Contents of {other}:\n\n[FILE] b.txt"

    def test_unrecognized_prompt_returns_help(self):
        """Should answer with help text without any connection."""
        result = asyncio.run(FilesystemClient().process_prompt("make me a sandwich"))

        assert not result.is_error
        assert result.text == HELP_TEXT

    def test_recognized_prompt_requires_connection(self):
        """Should raise NotConnectedError for a real command."""
        with pytest.raises(NotConnectedError):
            asyncio.run(FilesystemClient().process_prompt("list files"))
