"""Grammar options — the caller-facing description of a commit convention.

Defaults describe the conventional-commit convention. Every pattern field
accepts either a ready ``re.Pattern`` or a string that is compiled later by
``compile_grammar``; list fields accept a sequence or a comma-delimited
string such as ``"close,closes,fix"``.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from commitlens_core.errors import ConfigurationError

DEFAULT_HEADER_PATTERN = r"^(\w*)(?:\(([\w$.\-*/ ]*)\))?: (.*)$"
DEFAULT_HEADER_CORRESPONDENCE = ("type", "scope", "subject")
DEFAULT_REFERENCE_ACTIONS = (
    "close",
    "closes",
    "closed",
    "fix",
    "fixes",
    "fixed",
    "resolve",
    "resolves",
    "resolved",
)
DEFAULT_ISSUE_PREFIXES = ("#",)
DEFAULT_NOTE_KEYWORDS = ("BREAKING CHANGE", "BREAKING-CHANGE")
DEFAULT_FIELD_PATTERN = r"^-(.*?)-$"
DEFAULT_REVERT_PATTERN = r'^Revert\s"([\s\S]*)"\s*This reverts commit (\w*)\.'
DEFAULT_REVERT_CORRESPONDENCE = ("header", "hash")

# Written by `git commit --cleanup=scissors`; nothing below it is part of the message.
SCISSOR = "# ------------------------ >8 ------------------------"

# Fields that hold names or keywords and may be given as "a,b,c".
_LIST_FIELDS = (
    "header_correspondence",
    "merge_correspondence",
    "revert_correspondence",
    "note_keywords",
    "reference_actions",
    "issue_prefixes",
)

# Keyword lists where "nothing configured" has its own meaning in the grammar.
_KEYWORD_FIELDS = ("note_keywords", "reference_actions", "issue_prefixes")


def split_list(value: str | Sequence[str] | None) -> tuple[str, ...] | None:
    """Normalise a list option to a tuple of trimmed, non-empty strings.

    None stays None so callers can tell "not configured" from "configured empty".
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    return tuple(part.strip() for part in value if part and part.strip())


@dataclass(frozen=True)
class GrammarOptions:
    """Immutable description of the patterns a commit message is parsed with."""

    header_pattern: str | re.Pattern[str] | None = DEFAULT_HEADER_PATTERN
    header_correspondence: Sequence[str] | str | None = DEFAULT_HEADER_CORRESPONDENCE
    merge_pattern: str | re.Pattern[str] | None = None
    merge_correspondence: Sequence[str] | str | None = None
    revert_pattern: str | re.Pattern[str] | None = DEFAULT_REVERT_PATTERN
    revert_correspondence: Sequence[str] | str | None = DEFAULT_REVERT_CORRESPONDENCE
    field_pattern: str | re.Pattern[str] | None = DEFAULT_FIELD_PATTERN
    note_keywords: Sequence[str] | str | None = DEFAULT_NOTE_KEYWORDS
    # Either a callable taking the "kw1|kw2" alternation, or a template containing "{keywords}".
    notes_pattern: Callable[[str], str | re.Pattern[str]] | str | None = None
    reference_actions: Sequence[str] | str | None = DEFAULT_REFERENCE_ACTIONS
    issue_prefixes: Sequence[str] | str | None = DEFAULT_ISSUE_PREFIXES
    issue_prefixes_case_sensitive: bool = False
    comment_char: str | None = None
    breaking_header_pattern: str | re.Pattern[str] | None = None
    scissor: str | None = SCISSOR

    def __post_init__(self):
        # Frozen dataclass: normalisation has to go through object.__setattr__.
        for name in _LIST_FIELDS:
            value = split_list(getattr(self, name))
            if name in _KEYWORD_FIELDS and not value:
                value = None
            object.__setattr__(self, name, value)

        comment_char = self.comment_char or None
        if comment_char is not None and (not isinstance(comment_char, str) or len(comment_char) != 1):
            raise ConfigurationError(f"comment_char must be a single character, got {self.comment_char!r}")
        object.__setattr__(self, "comment_char", comment_char)

    def replace(self, **changes) -> GrammarOptions:
        """Return a copy with the given options changed."""
        return dataclasses.replace(self, **changes)
