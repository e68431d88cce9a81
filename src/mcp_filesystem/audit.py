"""Audit logging for tool calls.

Append-only JSON Lines log with one record when a call arrives and one
when it completes. File contents are never written to the log, only
their length.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Arguments whose values are summarized rather than logged
BULKY_ARGUMENTS = frozenset({"content"})


def _summarize_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Replace bulky argument values with a length marker.

    Args:
        arguments: Original arguments dictionary.

    Returns:
        New dictionary safe to write to the log.
    """
    summarized: dict[str, Any] = {}
    for key, value in arguments.items():
        if key in BULKY_ARGUMENTS and isinstance(value, str):
            summarized[key] = f"<{len(value)} chars>"
        else:
            summarized[key] = value
    return summarized


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class AuditLogger:
    """Append-only audit logger with JSON Lines format.

    The log file is flushed after each write.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the audit logger.

        Args:
            log_path: Path to the audit log file.
        """
        self._log_path = log_path
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        return self._log_path

    def _write_line(self, data: dict[str, Any]) -> None:
        self._file.write(json.dumps(data, default=str) + "\n")
        self._file.flush()

    def log_request(self, request_id: str, tool_name: str, arguments: dict[str, Any]) -> None:
        """Log an incoming tool call.

        Args:
            request_id: Identifier correlating request and response.
            tool_name: Name of the tool being invoked.
            arguments: Tool arguments (bulky values summarized).
        """
        self._write_line(
            {
                "type": "request",
                "timestamp": _get_timestamp(),
                "request_id": request_id,
                "tool_name": tool_name,
                "arguments": _summarize_arguments(arguments),
            }
        )

    def log_response(self, request_id: str, status: str, duration_ms: float) -> None:
        """Log a tool call's completion.

        Args:
            request_id: Request identifier to correlate with.
            status: Result status (success/error).
            duration_ms: Execution time in milliseconds.
        """
        self._write_line(
            {
                "type": "response",
                "timestamp": _get_timestamp(),
                "request_id": request_id,
                "result_status": status,
                "execution_time_ms": duration_ms,
            }
        )

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLogger:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
