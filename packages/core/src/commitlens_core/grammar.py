"""Compiled grammar: every configurable pattern turned into a Matcher, once.

The parser never touches ``re`` directly. It asks a Matcher for the first
match (``match``) or for every match (``match_all``) and reads the result
through ``Captures``. Matchers hold no iteration state, so one
CompiledGrammar can be shared by any number of concurrent parses.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from commitlens_core.errors import ConfigurationError
from commitlens_core.options import GrammarOptions

logger = logging.getLogger(__name__)

# Matches nothing, not even the empty string.
_NO_MATCH = r"(?!.*)"

# One unlabeled sentence spanning the text. Used when no reference actions are
# configured and when none of them occur in the text.
CATCH_ALL = r"()(.+)"

MENTIONS_PATTERN = r"@([\w-]+)"


@dataclass(frozen=True)
class Captures:
    """The result of one successful match."""

    text: str
    groups: tuple[str | None, ...]
    named: Mapping[str, str | None]
    start: int
    end: int

    @classmethod
    def from_match(cls, m: re.Match[str]) -> Captures:
        return cls(text=m.group(0), groups=m.groups(), named=m.groupdict(), start=m.start(), end=m.end())

    def group(self, index: int) -> str | None:
        """Return capture group ``index`` (0 is the whole match), or None if it did not take part."""
        if index == 0:
            return self.text
        if index <= len(self.groups):
            return self.groups[index - 1]
        return None

    def assign(self, correspondence: Sequence[str]) -> dict[str, str | None]:
        """Map capture groups onto field names.

        A name that is also a named group in the pattern takes that group;
        otherwise the n-th name takes the n-th positional group. Empty
        captures are reported as None.
        """
        parts: dict[str, str | None] = {}
        for index, name in enumerate(correspondence):
            value = self.named[name] if name in self.named else self.group(index + 1)
            parts[name] = value or None
        return parts


class Matcher:
    """An immutable wrapper around one compiled pattern."""

    def __init__(self, pattern: re.Pattern[str]):
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"Matcher({self.pattern.pattern!r})"

    def match(self, text: str) -> Captures | None:
        """Return the first match anywhere in ``text``."""
        m = self.pattern.search(text)
        return Captures.from_match(m) if m else None

    def match_all(self, text: str) -> list[Captures]:
        """Return every non-overlapping match in ``text``, in order.

        The cursor is local to this call; nothing is remembered between calls.
        """
        results = []
        pos = 0
        while pos <= len(text):
            m = self.pattern.search(text, pos)
            if not m:
                break
            results.append(Captures.from_match(m))
            # A zero-width match would otherwise be found again at the same spot.
            pos = m.end() if m.end() > m.start() else m.end() + 1
        return results

    def test(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class CompiledGrammar:
    """Ready-to-use matchers built from one GrammarOptions."""

    header: Matcher
    revert: Matcher
    notes: Matcher
    reference_parts: Matcher
    references: Matcher
    mentions: Matcher
    merge: Matcher | None = None
    field: Matcher | None = None
    breaking_header: Matcher | None = None
    header_correspondence: tuple[str, ...] = ()
    merge_correspondence: tuple[str, ...] = ()
    revert_correspondence: tuple[str, ...] = ()


def _join(parts: Sequence[str]) -> str:
    return "|".join(part.strip() for part in parts if part.strip())


def _compile(name: str, value: str | re.Pattern[str], flags: int = 0) -> re.Pattern[str]:
    if isinstance(value, re.Pattern):
        return value
    try:
        return re.compile(value, flags)
    except re.error as e:
        raise ConfigurationError(f"Invalid {name} {value!r}: {e}") from e


def _optional_matcher(name: str, value: str | re.Pattern[str] | None) -> Matcher | None:
    if value is None or value == "":
        return None
    return Matcher(_compile(name, value))


def build_notes_pattern(note_keywords: Sequence[str] | None, notes_pattern=None) -> re.Pattern[str]:
    """Build the matcher for note lines such as ``BREAKING CHANGE: ...``.

    ``notes_pattern`` may be a callable taking the keyword alternation or a
    template string containing ``{keywords}``.
    """
    if not note_keywords:
        return re.compile(_NO_MATCH)
    keywords = _join(note_keywords)
    if notes_pattern is None:
        return re.compile(r"^[\s|*]*(" + keywords + r")[:\s]+(.*)", re.IGNORECASE)
    if callable(notes_pattern):
        return _compile("notes_pattern", notes_pattern(keywords))
    return _compile("notes_pattern", notes_pattern.replace("{keywords}", keywords))


def build_reference_parts_pattern(issue_prefixes: Sequence[str] | None, case_sensitive: bool = False) -> re.Pattern[str]:
    """Build the matcher that splits ``owner/repo#123`` into its parts.

    Groups: 1 = optional ``owner/repo`` segment, 2 = prefix, 3 = issue id.
    """
    if not issue_prefixes:
        return re.compile(_NO_MATCH)
    flags = re.ASCII if case_sensitive else re.ASCII | re.IGNORECASE
    return re.compile(r"(?:.*?)??\s*([\w\-./]*?)??(" + _join(issue_prefixes) + r")([\w-]*\d+)", flags)


def build_references_pattern(reference_actions: Sequence[str] | None) -> re.Pattern[str]:
    """Build the matcher for ``<action> <sentence>`` spans.

    The sentence runs up to the next action keyword or the end of the text.
    """
    if not reference_actions:
        return re.compile(CATCH_ALL, re.IGNORECASE)
    keywords = _join(reference_actions)
    return re.compile(r"(" + keywords + r")(?:\s+(.*?))(?=(?:" + keywords + r")|$)", re.IGNORECASE)


def compile_grammar(options: GrammarOptions) -> CompiledGrammar:
    """Compile ``options`` into a CompiledGrammar.

    Pure and side-effect free; the result is safe to share between threads.
    """
    if not isinstance(options, GrammarOptions):
        raise ConfigurationError(f"Expected GrammarOptions, got {type(options).__name__}")
    if not options.header_pattern:
        raise ConfigurationError("header_pattern is required")
    if not options.revert_pattern:
        raise ConfigurationError("revert_pattern is required")

    grammar = CompiledGrammar(
        header=Matcher(_compile("header_pattern", options.header_pattern)),
        revert=Matcher(_compile("revert_pattern", options.revert_pattern)),
        notes=Matcher(build_notes_pattern(options.note_keywords, options.notes_pattern)),
        reference_parts=Matcher(
            build_reference_parts_pattern(options.issue_prefixes, options.issue_prefixes_case_sensitive)
        ),
        references=Matcher(build_references_pattern(options.reference_actions)),
        mentions=Matcher(re.compile(MENTIONS_PATTERN, re.ASCII)),
        merge=_optional_matcher("merge_pattern", options.merge_pattern),
        field=_optional_matcher("field_pattern", options.field_pattern),
        breaking_header=_optional_matcher("breaking_header_pattern", options.breaking_header_pattern),
        header_correspondence=options.header_correspondence or (),
        merge_correspondence=options.merge_correspondence or (),
        revert_correspondence=options.revert_correspondence or (),
    )
    logger.debug(
        "Compiled grammar: notes=%s references=%s reference_parts=%s",
        grammar.notes.pattern.pattern,
        grammar.references.pattern.pattern,
        grammar.reference_parts.pattern.pattern,
    )
    return grammar
