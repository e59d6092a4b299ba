"""Output helpers shared by the commands."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from commitlens_core.models import CommitRecord


def record_to_json(record: CommitRecord, indent: int | None = None) -> str:
    return json.dumps(record.to_dict(), indent=indent, ensure_ascii=False)


def record_table(record: CommitRecord) -> Table:
    """Render the interesting parts of a record as a two-column table.

    Message text is escaped; only the labels added here carry markup.
    """
    table = Table(title=escape(record.header or "(no header)"), show_header=True, header_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    for name, value in record.fields.items():
        table.add_row(escape(name), escape(value) if value is not None else "[dim]—[/dim]")
    if record.merge is not None:
        table.add_row("merge", escape(record.merge))
    if record.body:
        table.add_row("body", escape(record.body))
    if record.footer:
        table.add_row("footer", escape(record.footer))
    for note in record.notes:
        table.add_row(f"[red]{escape(note.title)}[/red]", escape(note.text))
    for ref in record.references:
        target = "/".join(p for p in (ref.owner, ref.repository) if p)
        table.add_row(f"[green]{escape(ref.action or 'ref')}[/green]", escape(f"{target}{ref.prefix}{ref.issue}"))
    if record.mentions:
        table.add_row("mentions", escape(", ".join(f"@{m}" for m in record.mentions)))
    if record.revert is not None:
        table.add_row("[yellow]revert[/yellow]", escape(", ".join(f"{k}={v}" for k, v in record.revert.items())))
    for name, value in record.custom_fields.items():
        table.add_row(escape(f"-{name}-"), escape(value))
    return table


def print_record(console: Console, record: CommitRecord, fmt: str) -> None:
    if fmt == "table":
        console.print(record_table(record))
    else:
        # JSON goes out untouched; rich would wrap long lines and read brackets as markup.
        click.echo(record_to_json(record, indent=2))
