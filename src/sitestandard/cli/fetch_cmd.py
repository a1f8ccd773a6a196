"""CLI commands for reading publications and documents.

Usage:
    sitestandard publications --did did:plc:abc123
    sitestandard publications --rkey 3kabc --json
    sitestandard documents --publication at://did:plc:abc123/site.standard.publication/3kabc
    sitestandard record at://did:plc:abc123/site.standard.document/3lxyz
"""

from __future__ import annotations

import typer
from rich.table import Table

from sitestandard.cli.common import (
    DidOption,
    JsonOption,
    LogLevelOption,
    PdsOption,
    console,
    dump_json,
    err_console,
    make_client,
    run,
)
from sitestandard.core.at_uri import parse_at_uri
from sitestandard.core.documents import get_document_slug
from sitestandard.core.model import Document, Publication, RecordEnvelope


def publications(
    rkey: str | None = typer.Option(None, "--rkey", "-k", help="Fetch a single publication"),
    did: str | None = DidOption,
    pds: str | None = PdsOption,
    as_json: bool = JsonOption,
    log_level: str | None = LogLevelOption,
) -> None:
    """List publications, or fetch one by record key."""
    client = make_client(did, pds, log_level)

    if rkey:
        found = run(client.fetch_publication(rkey))
        _print_single(found, f"Publication {rkey} not found", as_json)
        return

    items = run(client.fetch_all_publications())
    if as_json:
        dump_json(items)
        return
    _publication_table(items)


def documents(
    rkey: str | None = typer.Option(None, "--rkey", "-k", help="Fetch a single document"),
    publication: str | None = typer.Option(
        None, "--publication", "-p", help="Only documents of this publication AT-URI"
    ),
    did: str | None = DidOption,
    pds: str | None = PdsOption,
    as_json: bool = JsonOption,
    log_level: str | None = LogLevelOption,
) -> None:
    """List documents (newest first), or fetch one by record key."""
    client = make_client(did, pds, log_level)

    if rkey:
        found = run(client.fetch_document(rkey))
        _print_single(found, f"Document {rkey} not found", as_json)
        return

    if publication:
        items = run(client.fetch_documents_by_publication(publication))
    else:
        items = run(client.fetch_all_documents())

    if as_json:
        dump_json(items)
        return
    _document_table(items)


def record(
    uri: str = typer.Argument(..., help="AT-URI of a publication or document"),
    pds: str | None = PdsOption,
    as_json: bool = JsonOption,
    log_level: str | None = LogLevelOption,
) -> None:
    """Fetch a publication or document by AT-URI."""
    parsed = parse_at_uri(uri)
    if parsed is None:
        err_console.print(f"[red]Invalid AT-URI:[/red] {uri}")
        raise typer.Exit(code=1)

    client = make_client(parsed.did, pds, log_level)
    found = run(client.fetch_by_at_uri(uri))
    _print_single(found, f"No record at {uri}", as_json)


def _print_single(
    found: RecordEnvelope[Publication] | RecordEnvelope[Document] | None,
    missing: str,
    as_json: bool,
) -> None:
    if found is None:
        err_console.print(f"[yellow]{missing}[/yellow]")
        raise typer.Exit(code=1)
    if as_json:
        dump_json(found)
        return
    if isinstance(found.value, Publication):
        _publication_table([found])
    else:
        _document_table([found])


def _publication_table(items: list[RecordEnvelope[Publication]]) -> None:
    table = Table(title=f"Publications ({len(items)})")
    table.add_column("Name")
    table.add_column("URL")
    table.add_column("URI", overflow="fold")
    for item in items:
        table.add_row(item.value.name or "", item.value.url or "", item.uri)
    console.print(table)


def _document_table(items: list[RecordEnvelope[Document]]) -> None:
    table = Table(title=f"Documents ({len(items)})")
    table.add_column("Published")
    table.add_column("Title")
    table.add_column("Slug")
    table.add_column("Tags")
    for item in items:
        table.add_row(
            item.value.published_at.date().isoformat() if item.value.published_at else "-",
            item.value.title or "",
            get_document_slug(item),
            ", ".join(item.value.tags or []),
        )
    console.print(table)
