"""Line pipeline: raw message text → the lines the parser classifies.

Steps, in order: trim surrounding newlines, split, cut at the scissor line,
drop comment lines, drop gpg signature output.
"""

from __future__ import annotations

import re

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_GPG_RE = re.compile(r"^\s*gpg:")


def trim_newlines(text: str) -> str:
    """Strip leading and trailing line breaks, keeping everything in between.

    Other whitespace is left alone, so indentation on the first line survives.
    """
    return text.lstrip("\r\n").rstrip("\r\n")


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK_RE.split(text)


def truncate_to_scissor(lines: list[str], scissor: str | None) -> list[str]:
    """Drop the scissor line and everything after it."""
    if scissor is None:
        return lines
    try:
        return lines[: lines.index(scissor)]
    except ValueError:
        return lines


def is_comment(line: str, comment_char: str | None) -> bool:
    return comment_char is not None and line.startswith(comment_char)


def is_signature(line: str) -> bool:
    return _GPG_RE.match(line) is not None


def prepare_lines(raw: str, comment_char: str | None = None, scissor: str | None = None) -> list[str]:
    """Run the whole pipeline over ``raw``."""
    text = trim_newlines(raw)
    if not text:
        return []
    lines = truncate_to_scissor(split_lines(text), scissor)
    return [line for line in lines if not is_comment(line, comment_char) and not is_signature(line)]
