"""Issue and pull request reference scanning.

A line such as ``Closes #12, angular/material#34`` is read in two passes:
the references matcher splits the text into ``<action> <sentence>`` spans,
then the reference-parts matcher picks every ``[owner/]repo<prefix><id>``
out of each sentence.
"""

from __future__ import annotations

import re

from commitlens_core.grammar import CATCH_ALL, CompiledGrammar, Matcher
from commitlens_core.models import Reference

_CATCH_ALL = Matcher(re.compile(CATCH_ALL, re.IGNORECASE))


def _split_repository(segment: str | None) -> tuple[str | None, str | None]:
    """Split ``owner/repo`` into its parts; a segment without a slash is just a repository."""
    if not segment:
        return None, None
    owner, sep, repository = segment.partition("/")
    if not sep:
        return None, segment
    return owner, repository or None


def scan_references(text: str, grammar: CompiledGrammar) -> list[Reference]:
    """Return every reference found in ``text``, in order of appearance.

    When no ``<action> <sentence>`` span is found the whole text is scanned
    as one unlabeled sentence, so a bare ``#123`` is still picked up.
    """
    sentences = grammar.references.match_all(text)
    if not sentences:
        sentences = _CATCH_ALL.match_all(text)

    references = []
    for sentence in sentences:
        action = sentence.group(1) or None
        for part in grammar.reference_parts.match_all(sentence.group(2) or ""):
            owner, repository = _split_repository(part.group(1))
            references.append(
                Reference(
                    action=action,
                    owner=owner,
                    repository=repository,
                    issue=part.group(3),
                    raw=part.text,
                    prefix=part.group(2),
                )
            )
    return references
