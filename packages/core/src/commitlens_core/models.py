"""Parsed commit data models.

Plain frozen dataclasses so a record can be handed around, compared and
serialised without the parser's involvement. Sequences are tuples and
mappings are read-only views, so a record cannot change after the parser
returns it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from commitlens_core.grammar import CompiledGrammar

# Order in which the flat view of a record is assembled. Later groups win
# when two groups use the same name, e.g. a custom "-body-" field replaces
# the structural body in to_dict() but not in CommitRecord.body.
FIELD_PRECEDENCE = ("header", "merge", "structural", "custom")


@dataclass(frozen=True)
class Note:
    """A labelled footer annotation such as ``BREAKING CHANGE: ...``."""

    title: str
    text: str

    def to_dict(self) -> dict:
        return {"title": self.title, "text": self.text}


@dataclass(frozen=True)
class Reference:
    """An issue or pull request mentioned in the message."""

    action: str | None
    owner: str | None
    repository: str | None
    issue: str
    raw: str
    prefix: str

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "owner": self.owner,
            "repository": self.repository,
            "issue": self.issue,
            "raw": self.raw,
            "prefix": self.prefix,
        }


def flatten_fields(
    header_parts: Mapping[str, Any],
    merge_parts: Mapping[str, Any],
    structural: Mapping[str, Any],
    custom_parts: Mapping[str, Any],
) -> dict[str, Any]:
    """Flatten the four field groups into one dict following FIELD_PRECEDENCE."""
    groups = {
        "header": header_parts,
        "merge": merge_parts,
        "structural": structural,
        "custom": custom_parts,
    }
    flat: dict[str, Any] = {}
    for name in FIELD_PRECEDENCE:
        flat.update(groups[name])
    return flat


@dataclass(frozen=True)
class CommitRecord:
    """The structured form of one commit message.

    ``header_fields`` and ``merge_fields`` hold the values captured by the
    header and merge patterns, named after their correspondence lists.
    ``custom_fields`` holds the text captured under ``-name-`` field lines.
    The mapping fields take no part in hashing.
    """

    header: str | None = None
    body: str | None = None
    footer: str | None = None
    merge: str | None = None
    notes: tuple[Note, ...] = ()
    references: tuple[Reference, ...] = ()
    mentions: tuple[str, ...] = ()
    revert: Mapping[str, str | None] | None = field(default=None, hash=False)
    header_fields: Mapping[str, str | None] = field(default_factory=dict, hash=False)
    merge_fields: Mapping[str, str | None] = field(default_factory=dict, hash=False)
    custom_fields: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze whatever the caller passed in; frozen dataclasses need object.__setattr__.
        for name in ("header_fields", "merge_fields", "custom_fields"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        if self.revert is not None and not isinstance(self.revert, MappingProxyType):
            object.__setattr__(self, "revert", MappingProxyType(dict(self.revert)))
        object.__setattr__(self, "notes", tuple(self.notes))
        object.__setattr__(self, "references", tuple(self.references))
        object.__setattr__(self, "mentions", tuple(self.mentions))

    @property
    def fields(self) -> dict[str, str | None]:
        """Header and merge correspondence values; merge values win on a name clash."""
        return {**self.header_fields, **self.merge_fields}

    def structural(self) -> dict[str, Any]:
        return {
            "merge": self.merge,
            "header": self.header,
            "body": self.body,
            "footer": self.footer,
            "notes": [n.to_dict() for n in self.notes],
            "references": [r.to_dict() for r in self.references],
            "mentions": list(self.mentions),
            "revert": dict(self.revert) if self.revert is not None else None,
        }

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-serialisable view of the record (see FIELD_PRECEDENCE)."""
        return flatten_fields(self.header_fields, self.merge_fields, self.structural(), self.custom_fields)

    def __getitem__(self, name: str) -> Any:
        return self.to_dict()[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.to_dict().get(name, default)


def empty_record(grammar: CompiledGrammar | None = None) -> CommitRecord:
    """Return the record produced for a message with no usable lines.

    Correspondence names are present with None values, as in a normal parse
    where the pattern did not match.
    """
    if grammar is None:
        return CommitRecord()
    return CommitRecord(
        header_fields=dict.fromkeys(grammar.header_correspondence),
        merge_fields=dict.fromkeys(grammar.merge_correspondence),
    )
