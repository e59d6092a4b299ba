"""Commit message parser.

``parse_commit`` is a pure function of its three arguments: no I/O, no
shared mutable state, the same input always gives an equal record. The
work happens in four stages:

  1. line pipeline         — commitlens_core.lines
  2. merge / header        — first usable line(s)
  3. line classification   — custom field, note, reference, body or footer
  4. whole-text scans      — mentions and revert, run on the raw message

Line classification has exactly three pieces of state: whether we are still
in the body, whether the last note is still collecting lines, and which
custom field (if any) is open.
"""

from __future__ import annotations

import logging

from commitlens_core.errors import ConfigurationError, InputError
from commitlens_core.grammar import CompiledGrammar, compile_grammar
from commitlens_core.lines import prepare_lines, trim_newlines
from commitlens_core.models import CommitRecord, Note, empty_record
from commitlens_core.options import GrammarOptions
from commitlens_core.references import scan_references

logger = logging.getLogger(__name__)


def _append(src: str | None, line: str) -> str:
    """Join ``line`` onto ``src`` with a newline; an empty ``src`` is replaced outright."""
    return f"{src}\n{line}" if src else line


def _check_arguments(raw, options, grammar) -> str:
    if not isinstance(options, GrammarOptions):
        raise ConfigurationError("Expected grammar options")
    if not isinstance(grammar, CompiledGrammar):
        raise ConfigurationError("Expected a compiled grammar")
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if not isinstance(raw, str) or not raw.strip():
        raise InputError("Expected a raw commit")
    return raw


class _Note:
    """Mutable note used while lines are still being collected."""

    def __init__(self, title: str, text: str):
        self.title = title
        self.text = text


def parse_commit(raw: str | bytes, options: GrammarOptions, grammar: CompiledGrammar) -> CommitRecord:
    """Parse one raw commit message into a CommitRecord.

    Raises InputError when ``raw`` is empty or whitespace-only and
    ConfigurationError when ``options`` or ``grammar`` is missing.
    """
    raw = _check_arguments(raw, options, grammar)

    lines = prepare_lines(raw, options.comment_char, options.scissor)
    if not lines:
        return empty_record(grammar)

    # --- merge preamble and header ---------------------------------------
    merge = None
    first = lines.pop(0)
    merge_match = grammar.merge.match(first) if grammar.merge else None
    if merge_match:
        merge = merge_match.text
        merge_parts = merge_match.assign(grammar.merge_correspondence)
        while lines and not lines[0].strip():
            lines.pop(0)
        header = lines.pop(0) if lines else ""
    else:
        header = first
        merge_parts = dict.fromkeys(grammar.merge_correspondence)

    header_match = grammar.header.match(header)
    if header_match:
        header_parts = header_match.assign(grammar.header_correspondence)
    else:
        header_parts = dict.fromkeys(grammar.header_correspondence)

    references = scan_references(header, grammar)

    # --- body, footer, notes and custom fields ---------------------------
    body = ""
    footer = ""
    notes: list[_Note] = []
    custom_fields: dict[str, str] = {}
    current_field = None
    is_body = True
    continue_note = False

    for line in lines:
        if grammar.field:
            field_match = grammar.field.match(line)
            if field_match:
                current_field = field_match.group(1)
                continue
            if current_field:
                custom_fields[current_field] = _append(custom_fields.get(current_field), line)
                continue

        notes_match = grammar.notes.match(line)
        if notes_match:
            notes.append(_Note(notes_match.group(1) or "", notes_match.group(2) or ""))
            is_body = False
            continue_note = True
            footer = _append(footer, line)
            continue

        line_references = scan_references(line, grammar)
        if line_references:
            is_body = False
            continue_note = False
            references.extend(line_references)
            footer = _append(footer, line)
            continue

        if continue_note:
            notes[-1].text = _append(notes[-1].text, line)
            footer = _append(footer, line)
        elif is_body:
            body = _append(body, line)
        else:
            footer = _append(footer, line)

    if not notes and grammar.breaking_header:
        breaking = grammar.breaking_header.match(header)
        if breaking:
            notes.append(_Note("BREAKING CHANGE", breaking.group(3) or ""))

    # --- whole-text scans -------------------------------------------------
    mentions = [m.group(1) for m in grammar.mentions.match_all(raw)]

    revert_match = grammar.revert.match(raw)
    revert = revert_match.assign(grammar.revert_correspondence) if revert_match else None

    logger.debug(
        "Parsed commit %r: %d note(s), %d reference(s), %d mention(s)",
        header,
        len(notes),
        len(references),
        len(mentions),
    )

    return CommitRecord(
        header=header,
        body=trim_newlines(body) if body else None,
        footer=trim_newlines(footer) if footer else None,
        merge=merge,
        notes=tuple(Note(n.title, trim_newlines(n.text)) for n in notes),
        references=tuple(references),
        mentions=tuple(mentions),
        revert=revert,
        header_fields=header_parts,
        merge_fields=merge_parts,
        custom_fields=custom_fields,
    )


def parse(raw: str | bytes, options: GrammarOptions | None = None) -> CommitRecord:
    """Compile ``options`` (defaults when None) and parse a single message.

    Callers parsing many messages should compile once and use parse_commit.
    """
    if options is None:
        options = GrammarOptions()
    return parse_commit(raw, options, compile_grammar(options))
