"""Tests for STDIO transport and server lifecycle management."""

import io
from unittest.mock import MagicMock

import pytest

from mcp_filesystem.exceptions import NotConnectedError, ProtocolError, TransportError
from mcp_filesystem.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    SessionState,
    require_ready,
)
from mcp_filesystem.protocol.transport import StdioTransport

INIT_PARAMS = {
    "protocolVersion": MCP_PROTOCOL_VERSION,
    "capabilities": {},
    "clientInfo": {"name": "test-client", "version": "1.0"},
}


class TestStdioTransport:
    """Tests for the server-side STDIO transport."""

    def test_reads_line_from_stdin(self):
        """Should read a line from stdin."""
        transport = StdioTransport(
            stdin=io.StringIO('{"jsonrpc":"2.0","id":1,"method":"ping"}\n'),
            stdout=io.StringIO(),
        )

        assert transport.read_message() == '{"jsonrpc":"2.0","id":1,"method":"ping"}'

    def test_skips_empty_lines_and_strips(self):
        """Should skip blank lines and strip whitespace."""
        transport = StdioTransport(stdin=io.StringIO('\n\n  {"a": 1}  \n'), stdout=io.StringIO())

        assert transport.read_message() == '{"a": 1}'

    def test_returns_none_on_eof(self):
        """Should return None when stdin is exhausted."""
        transport = StdioTransport(stdin=io.StringIO(""), stdout=io.StringIO())

        assert transport.read_message() is None

    def test_returns_none_on_read_exception(self):
        """Should return None when read raises an OSError."""
        mock_stdin = MagicMock()
        mock_stdin.readline.side_effect = OSError("Pipe broken")
        transport = StdioTransport(stdin=mock_stdin, stdout=io.StringIO())

        assert transport.read_message() is None

    def test_writes_line_to_stdout(self):
        """Should write a line to stdout with newline."""
        stdout = io.StringIO()
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)

        transport.write_message('{"jsonrpc":"2.0","id":1,"result":{}}')

        assert stdout.getvalue() == '{"jsonrpc":"2.0","id":1,"result":{}}\n'

    def test_logs_to_stderr_only(self):
        """Should write logs to stderr and leave stdout untouched."""
        stdout, stderr = io.StringIO(), io.StringIO()
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout, stderr=stderr)

        transport.log("Test message")

        assert stderr.getvalue() == "[MCP] Test message\n"
        assert stdout.getvalue() == ""

    def test_close_stops_reading_and_writing(self):
        """Should stop reading and refuse writes once closed."""
        transport = StdioTransport(stdin=io.StringIO('{"a": 1}\n'), stdout=io.StringIO())

        transport.close()
        transport.close()

        assert transport.closed
        assert transport.read_message() is None
        with pytest.raises(TransportError):
            transport.write_message("{}")

    def test_broken_pipe_raises_transport_error(self):
        """Should wrap a broken stdout pipe in TransportError."""
        stdout = MagicMock()
        stdout.write.side_effect = BrokenPipeError("gone")
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)

        with pytest.raises(TransportError, match="gone"):
            transport.write_message("{}")

    def test_any_os_error_raises_transport_error(self):
        """Should wrap other stdout OSErrors such as EBADF too."""
        stdout = MagicMock()
        stdout.write.side_effect = OSError(9, "Bad file descriptor")
        transport = StdioTransport(stdin=io.StringIO(), stdout=stdout)

        with pytest.raises(TransportError, match="Bad file descriptor"):
            transport.write_message("{}")


class TestRequireReady:
    """Tests for the READY guard."""

    def test_allows_ready(self):
        """Should pass silently in READY."""
        require_ready(SessionState.READY)

    @pytest.mark.parametrize(
        "state",
        [SessionState.DISCONNECTED, SessionState.CONNECTING, SessionState.CLOSED],
    )
    def test_rejects_other_states(self, state):
        """Should raise NotConnectedError outside READY."""
        with pytest.raises(NotConnectedError):
            require_ready(state)


class TestLifecycleManager:
    """Tests for server lifecycle management."""

    def test_starts_disconnected(self):
        """Should start in DISCONNECTED state."""
        assert LifecycleManager().state == SessionState.DISCONNECTED

    def test_handles_initialize_request(self):
        """Should enter CONNECTING and advertise server info."""
        manager = LifecycleManager()

        result = manager.handle_initialize(INIT_PARAMS)

        assert manager.state == SessionState.CONNECTING
        assert result["protocolVersion"] == MCP_PROTOCOL_VERSION
        assert result["capabilities"] == {"tools": {}}
        assert result["serverInfo"]["name"] == "mcp-filesystem"
        assert manager.client_info == {"name": "test-client", "version": "1.0"}

    def test_echoes_requested_protocol_version(self):
        """Should echo back the version the client asks for."""
        result = LifecycleManager().handle_initialize({"protocolVersion": "2025-03-26"})

        assert result["protocolVersion"] == "2025-03-26"

    def test_handles_initialized_notification(self):
        """Should transition to READY on initialized notification."""
        manager = LifecycleManager()
        manager.handle_initialize(INIT_PARAMS)

        manager.handle_initialized()

        assert manager.is_ready

    def test_rejects_second_initialize(self):
        """Should reject initialize once the handshake has started."""
        manager = LifecycleManager()
        manager.handle_initialize(INIT_PARAMS)

        with pytest.raises(ProtocolError, match="already initialized"):
            manager.handle_initialize(INIT_PARAMS)

    def test_rejects_initialized_before_initialize(self):
        """Should reject initialized if initialize not called."""
        with pytest.raises(ProtocolError, match="not initializing"):
            LifecycleManager().handle_initialized()

    def test_require_ready_before_handshake(self):
        """Should refuse operations before the handshake completes."""
        manager = LifecycleManager()
        manager.handle_initialize(INIT_PARAMS)

        with pytest.raises(NotConnectedError):
            manager.require_ready()

    def test_close_is_terminal(self):
        """Should report closed after handle_close."""
        manager = LifecycleManager()
        manager.handle_initialize(INIT_PARAMS)
        manager.handle_initialized()

        manager.handle_close()

        assert manager.state == SessionState.CLOSED
        with pytest.raises(NotConnectedError, match="closed"):
            manager.require_ready()
