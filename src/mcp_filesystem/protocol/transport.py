"""Line-delimited JSON transports.

The server reads and writes stdin/stdout synchronously. The client side
is asyncio-based: it either spawns the server as a subprocess and talks
over its pipes, or feeds lines straight into an embedded MCPServer.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Sequence
from typing import TYPE_CHECKING, TextIO

from mcp_filesystem.exceptions import TransportError
from mcp_filesystem.protocol.jsonrpc import MAX_MESSAGE_SIZE

if TYPE_CHECKING:
    from mcp_filesystem.server import MCPServer

# Grace period for the server process to exit after stdin is closed
PROCESS_EXIT_TIMEOUT = 3.0


class StdioTransport:
    """STDIO transport for the server side.

    Reads JSON-RPC messages from stdin and writes responses to stdout.
    Logging goes to stderr to avoid corrupting the protocol stream.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
            stderr: Log stream (defaults to sys.stderr).
        """
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read_message(self) -> str | None:
        """Read a message from stdin.

        Reads lines until a non-empty line is found.

        Returns:
            Message string (stripped), or None on EOF or once closed.
        """
        while not self._closed:
            try:
                line = self._stdin.readline()
            except (OSError, ValueError):
                return None

            if not line:  # EOF
                return None

            line = line.strip()
            if line:  # Skip empty lines
                return line
        return None

    def write_message(self, message: str) -> None:
        """Write a message to stdout.

        Args:
            message: JSON string to write.

        Raises:
            TransportError: If the transport is closed or stdout fails.
        """
        if self._closed:
            raise TransportError("Transport is closed")
        try:
            self._stdout.write(message + "\n")
            self._stdout.flush()
        except (OSError, ValueError) as e:
            raise TransportError(f"Failed to write message: {e}") from e

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"[MCP] {message}\n")
        self._stderr.flush()

    def close(self) -> None:
        """Flush stdout and stop reading; idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            self._stdout.flush()
        except (OSError, ValueError):
            pass


class ClientTransport(ABC):
    """Abstract base class for client-side transports."""

    @abstractmethod
    async def start(self) -> None:
        """Open the connection to the server."""
        pass

    @abstractmethod
    async def send(self, message: str) -> None:
        """Send one encoded message.

        Raises:
            TransportError: If the stream is broken.
        """
        pass

    @abstractmethod
    async def receive(self) -> str | None:
        """Receive one encoded message.

        Returns:
            The message, or None once the peer has gone away.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection; idempotent."""
        pass


class SubprocessTransport(ClientTransport):
    """Spawns the server and exchanges lines over its stdin/stdout.

    The server's stderr is inherited so its log lines reach the user.
    """

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        env: dict[str, str] | None = None,
        cwd: str | None = None,
    ) -> None:
        self._command = command
        self._args = list(args)
        self._env = env
        self._cwd = cwd
        self._process: asyncio.subprocess.Process | None = None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    async def start(self) -> None:
        if self._process is not None:
            raise TransportError("Transport already started")
        try:
            self._process = await asyncio.create_subprocess_exec(
                self._command,
                *self._args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                env=self._env,
                cwd=self._cwd,
                limit=MAX_MESSAGE_SIZE + 1024,
            )
        except OSError as e:
            raise TransportError(f"Failed to start server '{self._command}': {e}") from e

    async def send(self, message: str) -> None:
        process = self._require_process()
        if process.stdin is None or process.stdin.is_closing():
            raise TransportError("Server stdin is closed")
        try:
            process.stdin.write(message.encode("utf-8") + b"\n")
            await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise TransportError(f"Server connection lost: {e}") from e

    async def receive(self) -> str | None:
        process = self._require_process()
        if process.stdout is None:
            return None
        while True:
            try:
                line = await process.stdout.readline()
            except ValueError as e:  # line exceeded the stream limit
                raise TransportError(f"Oversized message from server: {e}") from e
            except ConnectionResetError:
                return None
            if not line:
                return None
            text = line.decode("utf-8").strip()
            if text:
                return text

    async def close(self) -> None:
        process = self._process
        if process is None or process.returncode is not None:
            return
        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()
        try:
            await asyncio.wait_for(process.wait(), timeout=PROCESS_EXIT_TIMEOUT)
        except asyncio.TimeoutError:
            process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=PROCESS_EXIT_TIMEOUT)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()

    def _require_process(self) -> asyncio.subprocess.Process:
        if self._process is None:
            raise TransportError("Transport not started")
        return self._process


class InProcessTransport(ClientTransport):
    """Feeds encoded messages to an embedded server.

    Messages still go through the full JSON encode/decode path; only
    the byte stream is skipped.
    """

    def __init__(self, server: MCPServer) -> None:
        self._server = server
        self._outbox: deque[str] = deque()
        self._started = False
        self._closed = False

    @property
    def server(self) -> MCPServer:
        return self._server

    async def start(self) -> None:
        if self._closed:
            raise TransportError("Transport is closed")
        self._started = True

    async def send(self, message: str) -> None:
        if not self._started or self._closed:
            raise TransportError("Transport is not open")
        response = self._server.handle_message(message)
        if response is not None:
            self._outbox.append(response)

    async def receive(self) -> str | None:
        if self._closed or not self._outbox:
            # Nothing queued means the server will never answer
            return None
        return self._outbox.popleft()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._outbox.clear()
        self._server.close()
