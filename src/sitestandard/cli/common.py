"""Shared plumbing for CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import orjson
import typer
from pydantic import BaseModel
from rich.console import Console

from sitestandard.config import Settings
from sitestandard.config import settings as default_settings
from sitestandard.errors import SiteStandardError
from sitestandard.observability.logging import configure_logging
from sitestandard.records.repository import RecordRepository, create_client

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)

DidOption = typer.Option(None, "--did", "-d", help="Repository DID (default: SITE_STANDARD_DID)")
PdsOption = typer.Option(None, "--pds", help="Home endpoint override (default: SITE_STANDARD_PDS)")
JsonOption = typer.Option(False, "--json", "-j", help="Print records as JSON")
LogLevelOption = typer.Option(None, "--log-level", help="Log level (default: SITE_STANDARD_LOG_LEVEL)")


def build_settings(
    did: str | None,
    pds: str | None,
    log_level: str | None = None,
) -> Settings:
    """Overlay command-line options on the environment settings and set up logging."""
    overrides: dict[str, Any] = {}
    if did:
        overrides["did"] = did
    if pds:
        overrides["pds"] = pds
    if log_level:
        overrides["log_level"] = log_level
    config = default_settings.model_copy(update=overrides)
    configure_logging(json_format=config.log_json, level=config.log_level)
    return config


def make_client(did: str | None, pds: str | None, log_level: str | None = None) -> RecordRepository:
    """Build a client from options, exiting with code 1 on bad configuration."""
    try:
        return create_client(build_settings(did, pds, log_level))
    except SiteStandardError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning library errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except SiteStandardError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def dump_json(payload: Any) -> None:
    """Print models (or lists of models) as indented JSON."""
    if isinstance(payload, list):
        data = [_plain(item) for item in payload]
    else:
        data = _plain(payload)
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value
