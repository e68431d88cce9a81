"""Tests for plain-English command parsing."""

import pytest

from mcp_filesystem.commands import HELP_TEXT, parse_command
from mcp_filesystem.tools.base import CallRequest


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (
            "create file a.txt with content hello",
            CallRequest("create_file", {"filepath": "./ws/a.txt", "content": "hello"}),
        ),
        ("Read File notes.txt", CallRequest("read_file", {"filepath": "./ws/notes.txt"})),
        (
            "edit file a.txt with content new text here",
            CallRequest("edit_file", {"filepath": "./ws/a.txt", "content": "new text here"}),
        ),
        ("delete file old.log", CallRequest("delete_file", {"filepath": "./ws/old.log"})),
        ("list files", CallRequest("list_files", {"dirpath": "./ws"})),
        ("please LIST FILES now", CallRequest("list_files", {"dirpath": "./ws"})),
    ],
)
def test_recognized_commands(text, expected):
    """Should map each command shape to its tool call."""
    assert parse_command(text, "./ws") == expected


def test_trailing_slash_in_working_directory():
    """Should not double the separator."""
    assert parse_command("read file a.txt", "./ws/") == CallRequest(
        "read_file", {"filepath": "./ws/a.txt"}
    )


def test_first_keyword_wins():
    """Should use the first command whose keyword appears."""
    request = parse_command("create file a.txt with content read file b.txt", "./ws")

    assert request == CallRequest(
        "create_file", {"filepath": "./ws/a.txt", "content": "read file b.txt"}
    )


@pytest.mark.parametrize(
    "text",
    [
        "create file a.txt",
        "edit file a.txt",
        "hello there",
        "",
    ],
)
def test_unrecognized_commands(text):
    """Should return None when no command matches fully."""
    assert parse_command(text, "./ws") is None


def test_help_text_lists_every_command():
    """Should mention each supported command."""
    for keyword in ("create file", "read file", "edit file", "delete file", "list files"):
        assert keyword in HELP_TEXT
