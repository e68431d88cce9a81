"""Filesystem tool server - main entry point.

Serves create_file, read_file, edit_file, delete_file, list_files and
create_directory over newline-delimited JSON-RPC on stdin/stdout.
Logs go to stderr. Paths are used as given, relative to the server's
working directory; the server applies no sandboxing of its own, so run
it where the client is allowed to write.

Configuration (optional) is a YAML file, see config/settings.yaml:

    server:
      name: mcp-filesystem
    audit:
      log_file: "${HOME}/.mcp-filesystem/audit.jsonl"
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_filesystem import __version__
from mcp_filesystem.config import AppConfig, load_config
from mcp_filesystem.exceptions import MCPFilesystemError, TransportError
from mcp_filesystem.protocol.transport import StdioTransport
from mcp_filesystem.server import MCPServer


def serve(server: MCPServer, transport: StdioTransport) -> int:
    """Run the message loop until EOF or interrupt.

    Args:
        server: Server handling each message.
        transport: Transport to read requests from and write responses to.

    Returns:
        Exit code (0 on EOF, 130 on interrupt, 1 on error).
    """
    transport.log("Filesystem MCP server running on stdio")
    try:
        while True:
            message = transport.read_message()
            if message is None:
                transport.log("EOF received, shutting down")
                return 0

            response = server.handle_message(message)
            if response is not None:
                transport.write_message(response)

    except KeyboardInterrupt:
        transport.log("Interrupted, shutting down")
        return 130  # Standard exit code for SIGINT

    except TransportError as e:
        transport.log(f"Transport error: {e}")
        return 1

    except Exception as e:
        transport.log(f"Error: {e}")
        return 1

    finally:
        server.close()
        transport.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="mcp-filesystem-server",
        description="Filesystem tools over JSON-RPC on stdio",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML settings file (default: built-in defaults)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-filesystem {__version__}",
    )

    args = parser.parse_args(argv)
    transport = StdioTransport()

    try:
        config = load_config(args.config) if args.config else AppConfig()
        server = MCPServer(config=config, log=transport.log)
    except (MCPFilesystemError, OSError) as e:
        transport.log(f"Error loading server: {e}")
        return 1

    if args.config:
        transport.log(f"Settings loaded from: {args.config}")

    return serve(server, transport)


if __name__ == "__main__":
    sys.exit(main())
