"""File helpers and a minimal non-escaping template renderer."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Any

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

PathLike = "str | os.PathLike[str]"


def read_file_to_string(file_path: str | os.PathLike[str]) -> str:
    """Return the file's contents, or an empty string if it cannot be opened."""
    try:
        handle = open(file_path, encoding="utf-8")
    except OSError:
        return ""
    with handle:
        return handle.read()


def read_lines(file_path: str | os.PathLike[str]) -> list[str]:
    """Return the file's lines without line terminators; raise OSError if unreadable."""
    with open(file_path, encoding="utf-8", newline="") as handle:
        text = handle.read()
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def create_and_write_to_file(content: str, file_path: str | os.PathLike[str]) -> None:
    """Create (or truncate) the file and write content to it."""
    with open(file_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
    print(f"successfully wrote to {os.fspath(file_path)}")


def _render_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``{{ name }}`` placeholders from context, without escaping.

    Unknown names render as an empty string.
    """
    return _PLACEHOLDER.sub(
        lambda match: _render_value(context.get(match.group(1))), template
    )