"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

from mcp_filesystem.protocol.transport import InProcessTransport
from mcp_filesystem.server import MCPServer

TOOL_NAMES = [
    "create_file",
    "read_file",
    "edit_file",
    "delete_file",
    "list_files",
    "create_directory",
]


def make_request(msg_id, method, params=None) -> str:
    """Encode a JSON-RPC request line."""
    request = {"jsonrpc": "2.0", "id": msg_id, "method": method}
    if params is not None:
        request["params"] = params
    return json.dumps(request)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty directory for tool calls to operate in."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def server() -> MCPServer:
    """Server with the default filesystem tools."""
    return MCPServer()


@pytest.fixture
def initialized_server(server: MCPServer) -> MCPServer:
    """Server that has completed the handshake."""
    server.handle_message(
        make_request(
            1,
            "initialize",
            {
                "protocolVersion": "2024-11-05",
                "clientInfo": {"name": "test", "version": "1.0"},
                "capabilities": {},
            },
        )
    )
    server.handle_message(json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}))
    return server


@pytest.fixture
def in_process_transport(server: MCPServer) -> InProcessTransport:
    """Client transport wired to an embedded server."""
    return InProcessTransport(server)
