"""AT-URI parsing and construction.

An AT-URI addresses one record: ``at://{did}/{collection}/{rkey}``.
Pure functions; invalid input yields None, never a partial match.
"""

from __future__ import annotations

from typing import Final
from urllib.parse import quote

from sitestandard.core.model import ParsedAtUri

SCHEME: Final[str] = "at://"
DID_PREFIX: Final[str] = "did:"


def parse_at_uri(uri: str) -> ParsedAtUri | None:
    """Parse an AT-URI into its components.

    Args:
        uri: AT-URI in format at://did:plc:xxx/collection/rkey

    Returns:
        Parsed components, or None if the URI is invalid
    """
    if not uri.startswith(SCHEME):
        return None

    parts = uri[len(SCHEME) :].split("/")
    if len(parts) != 3:
        return None

    did, collection, rkey = parts
    if not did.startswith(DID_PREFIX) or not collection or not rkey:
        return None

    return ParsedAtUri(did=did, collection=collection, rkey=rkey)


def build_at_uri(did: str, collection: str, rkey: str) -> str:
    """Construct an AT-URI from its components."""
    return f"{SCHEME}{did}/{collection}/{rkey}"


def extract_rkey(uri: str) -> str | None:
    """Return the record key of an AT-URI, or None if invalid."""
    parsed = parse_at_uri(uri)
    return parsed.rkey if parsed else None


def is_at_uri(uri: str) -> bool:
    return parse_at_uri(uri) is not None


def at_uri_to_https(uri: str, pds: str) -> str | None:
    """Convert an AT-URI to the getRecord XRPC URL on a given PDS.

    Args:
        uri: AT-URI of the record
        pds: PDS base URL; a trailing slash is ignored

    Returns:
        HTTPS URL for com.atproto.repo.getRecord, or None if uri is invalid
    """
    parsed = parse_at_uri(uri)
    if parsed is None:
        return None

    return (
        f"{pds.rstrip('/')}/xrpc/com.atproto.repo.getRecord"
        f"?repo={quote(parsed.did, safe='')}"
        f"&collection={quote(parsed.collection, safe='')}"
        f"&rkey={quote(parsed.rkey, safe='')}"
    )
