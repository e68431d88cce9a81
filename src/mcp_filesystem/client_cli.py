"""Command-line client: run one plain-English file command.

    mcp-filesystem-client create file notes.txt with content hello
    mcp-filesystem-client --workdir ./docs list files
    mcp-filesystem-client --list-tools
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_filesystem import __version__
from mcp_filesystem.client import FilesystemClient
from mcp_filesystem.config import AppConfig, load_config
from mcp_filesystem.exceptions import MCPFilesystemError
from mcp_filesystem.protocol.transport import ClientTransport, InProcessTransport
from mcp_filesystem.server import MCPServer


async def run(
    config: AppConfig,
    prompt: str,
    working_directory: str | None,
    list_tools: bool,
    transport: ClientTransport | None = None,
) -> int:
    """Connect, run the command and print the result.

    Returns:
        Exit code (1 when the tool reported an error).
    """
    async with FilesystemClient(config.client, transport=transport) as client:
        if list_tools:
            for tool in await client.list_tools():
                print(f"{tool.name}: {tool.description}")
            return 0

        result = await client.process_prompt(prompt, working_directory)
        print(result.text)
        return 1 if result.is_error else 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mcp-filesystem-client",
        description="Run a file command against the filesystem tool server",
    )
    parser.add_argument("prompt", nargs="*", help="Command text, e.g. 'read file notes.txt'")
    parser.add_argument(
        "--workdir",
        "-w",
        default=None,
        help="Directory file names resolve against (default: from settings)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML settings file",
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the server's tool catalog and exit",
    )
    parser.add_argument(
        "--in-process",
        action="store_true",
        help="Run the server inside this process instead of spawning it",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-filesystem {__version__}",
    )

    args = parser.parse_args(argv)
    if not args.prompt and not args.list_tools:
        parser.error("a command or --list-tools is required")

    try:
        config = load_config(args.config) if args.config else AppConfig()
        transport = InProcessTransport(MCPServer(config=config)) if args.in_process else None
        return asyncio.run(
            run(config, " ".join(args.prompt), args.workdir, args.list_tools, transport)
        )
    except MCPFilesystemError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
