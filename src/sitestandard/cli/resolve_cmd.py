"""CLI command for resolving a DID to its home endpoint.

Usage:
    sitestandard resolve did:plc:abc123
    sitestandard resolve did:plc:abc123 --json
"""

from __future__ import annotations

import typer

from sitestandard.cache import TTLCache
from sitestandard.cli.common import JsonOption, LogLevelOption, build_settings, console, dump_json, run
from sitestandard.network.identity import IdentityResolver


def resolve(
    did: str = typer.Argument(..., help="DID to resolve"),
    as_json: bool = JsonOption,
    log_level: str | None = LogLevelOption,
) -> None:
    """Resolve a DID to its PDS and handle."""
    config = build_settings(did, None, log_level)
    resolver = IdentityResolver(
        TTLCache(default_ttl=config.cache_ttl_seconds),
        resolver_url=config.resolver_url,
        timeout=config.http_timeout,
    )

    identity = run(resolver.resolve(did))

    if as_json:
        dump_json(identity)
        return

    console.print(f"[bold]DID:[/bold]    {identity.did}")
    console.print(f"[bold]PDS:[/bold]    {identity.pds}")
    console.print(f"[bold]Handle:[/bold] {identity.handle or '-'}")
