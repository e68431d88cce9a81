"""JSON-RPC 2.0 framing for the tool-call protocol.

Both peers use this module: the server parses requests and notifications
and formats responses, the client formats requests and parses responses.
Every message is a single JSON object on one line.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Maximum message size (16 MB); file contents travel inline
MAX_MESSAGE_SIZE = 16 * 1024 * 1024


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: int | str
    method: str
    params: dict[str, Any] | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: dict[str, Any] | None = None


@dataclass
class JsonRpcResponse:
    """Represents a JSON-RPC response, successful or not."""

    id: int | str | None
    result: Any | None = None
    error: dict[str, Any] | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def _load_object(raw: str) -> dict[str, Any]:
    if len(raw) > MAX_MESSAGE_SIZE:
        raise JsonRpcError(
            PARSE_ERROR, f"Message too large: {len(raw)} bytes exceeds {MAX_MESSAGE_SIZE} limit"
        )

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e

    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'")

    return data


def parse_message(raw: str) -> JsonRpcRequest | JsonRpcNotification:
    """Parse an incoming request or notification.

    Args:
        raw: Raw JSON string.

    Returns:
        Parsed request or notification.

    Raises:
        JsonRpcError: If the message is invalid.
    """
    data = _load_object(raw)

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: method must be a string")

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: params must be an object")

    if "id" in data:
        msg_id = data["id"]
        # bool is an int subclass but never a valid id
        if isinstance(msg_id, bool) or not isinstance(msg_id, int | str):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Request: id must be integer or string")
        return JsonRpcRequest(id=msg_id, method=method, params=params)
    else:
        return JsonRpcNotification(method=method, params=params)


def parse_response(raw: str) -> JsonRpcResponse | JsonRpcNotification:
    """Parse a message received by the client.

    Servers may interleave notifications with responses, so anything
    carrying a method is returned as a notification.

    Args:
        raw: Raw JSON string.

    Returns:
        Parsed response or notification.

    Raises:
        JsonRpcError: If the message is neither.
    """
    data = _load_object(raw)

    if "method" in data:
        params = data.get("params")
        if params is not None and not isinstance(params, dict):
            raise JsonRpcError(INVALID_REQUEST, "Invalid notification: params must be an object")
        return JsonRpcNotification(method=data["method"], params=params)

    if "id" not in data:
        raise JsonRpcError(INVALID_REQUEST, "Invalid response: missing id")

    has_result = "result" in data
    has_error = "error" in data
    if has_result == has_error:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid response: exactly one of result or error is required"
        )

    error = data.get("error")
    if has_error and not isinstance(error, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid response: error must be an object")

    return JsonRpcResponse(id=data["id"], result=data.get("result"), error=error)


def format_request(msg_id: int | str, method: str, params: dict[str, Any] | None = None) -> str:
    """Format a JSON-RPC request.

    Args:
        msg_id: Correlation id for the response.
        method: Method name.
        params: Optional parameters.

    Returns:
        JSON string.
    """
    request: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "method": method,
    }
    if params is not None:
        request["params"] = params
    return json.dumps(request)


def format_response(msg_id: int | str, result: Any) -> str:
    """Format a successful JSON-RPC response.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        JSON string.
    """
    response = {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "result": result,
    }
    return json.dumps(response)


def format_error(
    msg_id: int | str | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> str:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None for parse errors).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        JSON string.
    """
    error_obj: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error_obj["data"] = data

    response = {
        "jsonrpc": JSONRPC_VERSION,
        "id": msg_id,
        "error": error_obj,
    }
    return json.dumps(response)


def format_notification(method: str, params: dict[str, Any] | None = None) -> str:
    """Format a JSON-RPC notification.

    Args:
        method: Notification method name.
        params: Optional parameters.

    Returns:
        JSON string.
    """
    notification: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "method": method,
    }
    if params is not None:
        notification["params"] = params

    return json.dumps(notification)
