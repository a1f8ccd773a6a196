"""CLI commands for sitestandard.

Provides command-line interface using Typer:
- sitestandard resolve: Resolve a DID to its PDS
- sitestandard publications: List or fetch publications
- sitestandard documents: List or fetch documents
- sitestandard record: Fetch a record by AT-URI

Usage:
    sitestandard --help
    sitestandard resolve did:plc:abc123
    sitestandard documents --did did:plc:abc123 --publication at://did:plc:abc123/site.standard.publication/3k
    sitestandard record at://did:plc:abc123/site.standard.document/3l --json
"""

import typer

from sitestandard.cli.fetch_cmd import documents, publications, record
from sitestandard.cli.resolve_cmd import resolve

# Main CLI application
app = typer.Typer(
    name="sitestandard",
    help="Read site.standard publications and documents from an ATProto repository",
    no_args_is_help=True,
)

app.command("resolve")(resolve)
app.command("publications")(publications)
app.command("documents")(documents)
app.command("record")(record)


@app.callback()
def callback() -> None:
    """Read site.standard publications and documents from an ATProto repository."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
