"""Client facade for the filesystem tool server.

Example:
    async with FilesystemClient() as client:
        await client.create_file("./workspace/notes.txt", "hello")
        result = await client.read_file("./workspace/notes.txt")
        print(result.text)
"""

from __future__ import annotations

from typing import Any

from mcp_filesystem.commands import HELP_TEXT, parse_command
from mcp_filesystem.config import ClientConfig
from mcp_filesystem.exceptions import NotConnectedError, ProtocolError
from mcp_filesystem.protocol.lifecycle import SessionState
from mcp_filesystem.protocol.session import ClientSession
from mcp_filesystem.protocol.transport import ClientTransport, SubprocessTransport
from mcp_filesystem.tools.base import CallResult, ToolDefinition


class FilesystemClient:
    """Typed methods for each filesystem tool.

    Every method is one tools/call on the underlying session and raises
    NotConnectedError unless the session is READY.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: ClientTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client settings; the server is spawned from
                ``config.command`` unless a transport is given.
            transport: Explicit transport, e.g. an InProcessTransport.
        """
        self._config = config or ClientConfig()
        self._transport = transport
        self._session: ClientSession | None = None

    @property
    def session(self) -> ClientSession | None:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session is not None and self._session.is_ready

    async def connect(self) -> None:
        """Start a new session and complete the handshake."""
        if self._session is not None and self._session.state in (
            SessionState.CONNECTING,
            SessionState.READY,
        ):
            raise ProtocolError("Client already connected")
        transport = self._transport or SubprocessTransport(
            self._config.command, self._config.args
        )
        self._session = ClientSession(transport, call_timeout=self._config.call_timeout)
        await self._session.connect()

    async def disconnect(self) -> None:
        if self._session is not None:
            await self._session.disconnect()

    async def list_tools(self) -> list[ToolDefinition]:
        return await self._require_session().list_tools()

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> CallResult:
        return await self._require_session().call(tool_name, arguments)

    async def create_file(self, filepath: str, content: str) -> CallResult:
        return await self.call("create_file", {"filepath": filepath, "content": content})

    async def read_file(self, filepath: str) -> CallResult:
        return await self.call("read_file", {"filepath": filepath})

    async def edit_file(self, filepath: str, content: str) -> CallResult:
        return await self.call("edit_file", {"filepath": filepath, "content": content})

    async def delete_file(self, filepath: str) -> CallResult:
        return await self.call("delete_file", {"filepath": filepath})

    async def list_files(self, dirpath: str) -> CallResult:
        return await self.call("list_files", {"dirpath": dirpath})

    async def create_directory(self, dirpath: str) -> CallResult:
        return await self.call("create_directory", {"dirpath": dirpath})

    async def process_prompt(
        self, prompt: str, working_directory: str | None = None
    ) -> CallResult:
        """Run a plain-English command.

        Args:
            prompt: Text such as "read file notes.txt".
            working_directory: Directory file names resolve against;
                defaults to the configured working directory.

        Returns:
            The tool's result, or a success carrying HELP_TEXT when the
            prompt is not recognized.
        """
        request = parse_command(prompt, working_directory or self._config.working_directory)
        if request is None:
            return CallResult.success(HELP_TEXT)
        return await self.call(request.tool_name, request.arguments)

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise NotConnectedError()
        return self._session

    async def __aenter__(self) -> FilesystemClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
