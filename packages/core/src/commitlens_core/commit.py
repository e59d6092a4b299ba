"""Conventional-commit view used by changelog and release tooling.

Wraps the generic grammar with a fixed set of options and flattens the
record into a ``Commit`` whose text fields are never None. Messages read
from ``git log`` with GIT_LOG_FORMAT_FOR_PARSING also carry the hash and
author as ``-name-`` fields, exposed on ``CommitFromGitLog``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from commitlens_core.grammar import compile_grammar
from commitlens_core.models import Note, Reference
from commitlens_core.options import GrammarOptions
from commitlens_core.parser import parse_commit

BREAKING_CHANGE = "BREAKING CHANGE"
DEPRECATED = "DEPRECATED"

# Extra git log placeholders appended after the message body, one "-name-" field each.
COMMIT_FIELDS = {
    "hash": "%H",
    "shortHash": "%h",
    "author": "%aN",
}


def commit_fields_as_format(fields: dict[str, str]) -> str:
    """Render ``{"hash": "%H"}`` as ``%n-hash-%n%H``, for use in ``git log --format``."""
    return "".join(f"%n-{key}-%n{value}" for key, value in fields.items())


GIT_LOG_FORMAT_FOR_PARSING = "%B" + commit_fields_as_format(COMMIT_FIELDS)

_FIXUP_PREFIX_RE = re.compile(r"^fixup! ", re.IGNORECASE)
_SQUASH_PREFIX_RE = re.compile(r"^squash! ", re.IGNORECASE)
_REVERT_PREFIX_RE = re.compile(r"^revert:? ", re.IGNORECASE)

CONVENTIONAL_OPTIONS = GrammarOptions(
    comment_char="#",
    header_pattern=r"^(\w+)(?:\(([^)]+)\))?: (.*)$",
    header_correspondence=("type", "scope", "subject"),
    note_keywords=(BREAKING_CHANGE, DEPRECATED),
    notes_pattern=r"^\s*({keywords}): ?(.*)",
)
_GRAMMAR = compile_grammar(CONVENTIONAL_OPTIONS)


@dataclass(frozen=True)
class Commit:
    full_text: str
    header: str
    body: str
    footer: str
    type: str
    scope: str
    subject: str
    references: tuple[Reference, ...] = ()
    breaking_changes: tuple[Note, ...] = ()
    deprecations: tuple[Note, ...] = ()
    is_fixup: bool = False
    is_squash: bool = False
    is_revert: bool = False
    extra: dict = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class CommitFromGitLog(Commit):
    author: str | None = None
    hash: str | None = None
    short_hash: str | None = None


def _strip_prefixes(full_text: str) -> str:
    text = _FIXUP_PREFIX_RE.sub("", full_text, count=1)
    text = _SQUASH_PREFIX_RE.sub("", text, count=1)
    return _REVERT_PREFIX_RE.sub("", text, count=1)


def _parse(full_text: str | bytes) -> tuple[str, dict]:
    if isinstance(full_text, (bytes, bytearray)):
        full_text = full_text.decode("utf-8")
    record = parse_commit(_strip_prefixes(full_text), CONVENTIONAL_OPTIONS, _GRAMMAR)
    fields = record.fields
    values = {
        "full_text": full_text,
        "header": record.header or "",
        "body": record.body or "",
        "footer": record.footer or "",
        "type": fields.get("type") or "",
        "scope": fields.get("scope") or "",
        "subject": fields.get("subject") or "",
        "references": record.references,
        "breaking_changes": tuple(n for n in record.notes if n.title == BREAKING_CHANGE),
        "deprecations": tuple(n for n in record.notes if n.title == DEPRECATED),
        "is_fixup": _FIXUP_PREFIX_RE.match(full_text) is not None,
        "is_squash": _SQUASH_PREFIX_RE.match(full_text) is not None,
        "is_revert": _REVERT_PREFIX_RE.match(full_text) is not None,
    }
    return values, dict(record.custom_fields)


def parse_commit_message(full_text: str | bytes) -> Commit:
    """Parse a commit message written by hand or read from a commit-msg hook."""
    values, custom = _parse(full_text)
    return Commit(**values, extra=custom)


def parse_commit_from_git_log(raw: str | bytes) -> CommitFromGitLog:
    """Parse one entry of ``git log --format=GIT_LOG_FORMAT_FOR_PARSING``."""
    values, custom = _parse(raw)
    return CommitFromGitLog(
        **values,
        extra=custom,
        author=custom.get("author") or None,
        hash=custom.get("hash") or None,
        short_hash=custom.get("shortHash") or None,
    )
