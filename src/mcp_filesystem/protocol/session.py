"""Client-side protocol session.

One session owns one transport connection and allows a single request
in flight at a time. Responses are correlated by id; anything else the
server sends while a request is pending is logged and skipped.
"""

from __future__ import annotations

import asyncio
import itertools
import sys
from typing import Any, TextIO

from mcp_filesystem import __version__
from mcp_filesystem.exceptions import (
    CallInProgressError,
    CallTimeoutError,
    NotConnectedError,
    ProtocolError,
    RemoteError,
    TransportError,
)
from mcp_filesystem.protocol.jsonrpc import (
    MAX_MESSAGE_SIZE,
    JsonRpcError,
    JsonRpcNotification,
    format_notification,
    format_request,
    parse_response,
)
from mcp_filesystem.protocol.lifecycle import MCP_PROTOCOL_VERSION, SessionState, require_ready
from mcp_filesystem.protocol.transport import ClientTransport
from mcp_filesystem.tools.base import CallRequest, CallResult, ToolDefinition


class ClientSession:
    """State machine for one client connection.

    States run DISCONNECTED -> CONNECTING -> READY -> CLOSED. Calls are
    only accepted in READY; CLOSED is terminal.
    """

    def __init__(
        self,
        transport: ClientTransport,
        client_info: dict[str, str] | None = None,
        call_timeout: float | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            transport: Connection to the server, not yet started.
            client_info: Name and version sent during the handshake.
            call_timeout: Seconds to wait for each response; None waits forever.
            stderr: Log stream (defaults to sys.stderr).
        """
        self._transport = transport
        self._client_info = client_info or {"name": "mcp-filesystem-client", "version": __version__}
        self._call_timeout = call_timeout
        self._stderr = stderr or sys.stderr
        self._state = SessionState.DISCONNECTED
        self._ids = itertools.count(1)
        self._pending_id: int | None = None
        self._server_info: dict[str, Any] = {}
        self._catalog: list[ToolDefinition] | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == SessionState.READY

    @property
    def pending_id(self) -> int | None:
        return self._pending_id

    @property
    def server_info(self) -> dict[str, Any]:
        return dict(self._server_info)

    @property
    def cached_tools(self) -> list[ToolDefinition] | None:
        """Catalog from the last list_tools() call, if any."""
        return list(self._catalog) if self._catalog is not None else None

    def log(self, message: str) -> None:
        self._stderr.write(f"[MCP client] {message}\n")
        self._stderr.flush()

    async def connect(self) -> None:
        """Start the transport and perform the initialize handshake.

        Raises:
            ProtocolError: If the session is not DISCONNECTED or the
                handshake reply is malformed.
            TransportError: If the server cannot be reached.
        """
        if self._state != SessionState.DISCONNECTED:
            raise ProtocolError(f"Cannot connect from state {self._state.value}")

        self._state = SessionState.CONNECTING
        try:
            await self._transport.start()
            result = await self._request(
                "initialize",
                {
                    "protocolVersion": MCP_PROTOCOL_VERSION,
                    "capabilities": {},
                    "clientInfo": self._client_info,
                },
            )
            if not isinstance(result, dict) or "serverInfo" not in result:
                raise ProtocolError("Malformed initialize response")
            await self._transport.send(format_notification("notifications/initialized"))
        except Exception:
            self._state = SessionState.DISCONNECTED
            await self._transport.close()
            raise

        self._server_info = result.get("serverInfo") or {}
        self._state = SessionState.READY
        self.log(f"Connected to {self._server_info.get('name', 'server')}")

    async def disconnect(self) -> None:
        """Close the transport; the session cannot be reused afterwards."""
        if self._state == SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        self._catalog = None
        await self._transport.close()

    async def ping(self) -> None:
        """Check that the server is responsive."""
        require_ready(self._state)
        await self._request("ping")

    async def list_tools(self) -> list[ToolDefinition]:
        """Fetch the server's tool catalog.

        Returns:
            Tool definitions in advertisement order.
        """
        require_ready(self._state)
        result = await self._request("tools/list")
        tools = result.get("tools") if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise ProtocolError("Malformed tools/list response")
        self._catalog = [ToolDefinition.from_dict(tool) for tool in tools]
        return list(self._catalog)

    async def call(self, tool_name: str, arguments: dict[str, Any] | None = None) -> CallResult:
        """Invoke a tool and wait for its result.

        Args:
            tool_name: Tool to invoke.
            arguments: Tool arguments.

        Returns:
            The server's CallResult, success or failure.

        Raises:
            NotConnectedError: If the session is not READY.
            CallInProgressError: If another request is still pending.
            ProtocolError: If the encoded request exceeds MAX_MESSAGE_SIZE.
            TransportError: If the connection breaks before the result arrives.
        """
        require_ready(self._state)
        request = CallRequest(tool_name=tool_name, arguments=dict(arguments or {}))
        result = await self._request("tools/call", request.to_params())
        if not isinstance(result, dict):
            raise ProtocolError("Malformed tools/call response")
        return CallResult.from_dict(result)

    async def _request(self, method: str, params: dict[str, Any] | None = None) -> Any:
        if self._pending_id is not None:
            raise CallInProgressError(self._pending_id)

        msg_id = next(self._ids)
        message = format_request(msg_id, method, params)
        if len(message) > MAX_MESSAGE_SIZE:
            raise ProtocolError(
                f"Request too large: {len(message)} bytes exceeds {MAX_MESSAGE_SIZE} limit",
                details={"method": method, "size": len(message)},
            )

        self._pending_id = msg_id
        try:
            await self._send(message)
            if self._call_timeout is None:
                return await self._await_response(msg_id)
            try:
                return await asyncio.wait_for(
                    self._await_response(msg_id), timeout=self._call_timeout
                )
            except asyncio.TimeoutError:
                raise CallTimeoutError(method, self._call_timeout) from None
        finally:
            self._pending_id = None

    async def _send(self, message: str) -> None:
        try:
            await self._transport.send(message)
        except TransportError:
            await self._fail()
            raise

    async def _await_response(self, msg_id: int) -> Any:
        while True:
            try:
                raw = await self._transport.receive()
            except TransportError:
                await self._fail()
                raise
            if raw is None:
                await self._fail()
                raise TransportError("Server closed the connection")

            try:
                message = parse_response(raw)
            except JsonRpcError as e:
                self.log(f"Discarding invalid message: {e}")
                continue

            if isinstance(message, JsonRpcNotification):
                self.log(f"Ignoring server notification: {message.method}")
                continue

            if message.id is None and message.error is not None:
                # Server could not read the request far enough to learn its id
                raise RemoteError(
                    message.error.get("code", 0),
                    message.error.get("message", ""),
                    message.error.get("data"),
                )

            if message.id != msg_id:
                # Late reply to a request that already timed out
                self.log(f"Discarding response with stale id {message.id}")
                continue

            if message.error is not None:
                raise RemoteError(
                    message.error.get("code", 0),
                    message.error.get("message", ""),
                    message.error.get("data"),
                )
            return message.result

    async def _fail(self) -> None:
        if self._state == SessionState.CONNECTING:
            # connect() restores DISCONNECTED and closes the transport
            return
        self._state = SessionState.CLOSED
        self._catalog = None
        await self._transport.close()

    async def __aenter__(self) -> ClientSession:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
