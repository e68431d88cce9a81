"""Best-effort parsing of plain-English file commands.

Recognizes five shapes, e.g. "create file notes.txt with content hi".
Anything else yields None and the caller shows HELP_TEXT.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from mcp_filesystem.tools.base import CallRequest

HELP_TEXT = (
    "I didn't understand that command. Try: "
    "'create file filename.txt with content hello world', "
    "'read file filename.txt', "
    "'edit file filename.txt with content new content', "
    "'delete file filename.txt', or 'list files'"
)


@dataclass(frozen=True)
class CommandPattern:
    """Keyword that selects a command and the regex that extracts its fields."""

    keyword: str
    pattern: re.Pattern[str] | None
    build: Callable[[re.Match[str] | None, str], CallRequest]


def _join(working_directory: str, name: str) -> str:
    return f"{working_directory.rstrip('/')}/{name}"


COMMANDS = (
    CommandPattern(
        "create file",
        re.compile(r"create file (.+) with content (.+)", re.IGNORECASE),
        lambda m, wd: CallRequest(
            "create_file", {"filepath": _join(wd, m.group(1)), "content": m.group(2)}
        ),
    ),
    CommandPattern(
        "read file",
        re.compile(r"read file (.+)", re.IGNORECASE),
        lambda m, wd: CallRequest("read_file", {"filepath": _join(wd, m.group(1))}),
    ),
    CommandPattern(
        "edit file",
        re.compile(r"edit file (.+) with content (.+)", re.IGNORECASE),
        lambda m, wd: CallRequest(
            "edit_file", {"filepath": _join(wd, m.group(1)), "content": m.group(2)}
        ),
    ),
    CommandPattern(
        "delete file",
        re.compile(r"delete file (.+)", re.IGNORECASE),
        lambda m, wd: CallRequest("delete_file", {"filepath": _join(wd, m.group(1))}),
    ),
    CommandPattern(
        "list files",
        None,
        lambda m, wd: CallRequest("list_files", {"dirpath": wd}),
    ),
)


def parse_command(text: str, working_directory: str) -> CallRequest | None:
    """Map a command to a tool call.

    The first command whose keyword appears in the text decides; if its
    pattern then fails to match, the text is not recognized at all.

    Args:
        text: Command text.
        working_directory: Directory file names are resolved against.

    Returns:
        The call to make, or None when the text is not recognized.
    """
    lowered = text.lower()
    for command in COMMANDS:
        if command.keyword not in lowered:
            continue
        if command.pattern is None:
            return command.build(None, working_directory)
        match = command.pattern.search(text)
        if match is None:
            return None
        return command.build(match, working_directory)
    return None
