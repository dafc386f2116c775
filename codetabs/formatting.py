"""Whitespace cleanup for fenced code before it is highlighted."""

from __future__ import annotations

import re

FORMATTED_LANGUAGES = frozenset(
    {"javascript", "js", "typescript", "ts", "python", "py", "json"}
)
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def should_format(language: str | None) -> bool:
    """Return whether blocks tagged ``language`` are cleaned up."""
    return bool(language) and language.lower() in FORMATTED_LANGUAGES


def cleanup_code(code: str) -> str:
    """Strip trailing spaces and collapse runs of blank lines to one."""
    stripped = "\n".join(line.rstrip() for line in code.split("\n"))
    return _EXCESS_BLANK_LINES.sub("\n\n", stripped).strip("\n")


def format_code(code: str, language: str | None) -> str:
    """Clean up ``code`` when ``language`` is supported, else return it as is.

    Examples
    --------
    >>> format_code("x = 1   \\n\\n\\n\\ny = 2\\n", "python")
    'x = 1\\n\\ny = 2'
    >>> format_code("keep   ", "rust")
    'keep   '
    """
    if not should_format(language):
        return code
    return cleanup_code(code)


__all__ = ["FORMATTED_LANGUAGES", "cleanup_code", "format_code", "should_format"]
