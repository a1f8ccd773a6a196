"""Document addressing helpers."""

from __future__ import annotations

from sitestandard.core.at_uri import SCHEME, extract_rkey
from sitestandard.core.model import Document, RecordEnvelope


def get_document_slug(document: RecordEnvelope[Document]) -> str:
    """Slug of a document: its path without leading slash, else its rkey."""
    if document.value.path:
        return document.value.path.lstrip("/")
    return extract_rkey(document.uri) or ""


def get_document_url(document: RecordEnvelope[Document]) -> str:
    """Canonical URL of a document.

    Documents of an AT-URI site use the local ``/documents/{slug}`` route.
    Documents of an HTTPS site with a path resolve against that site.
    """
    site = document.value.site or ""
    path = document.value.path

    if site.startswith(SCHEME):
        return f"/documents/{get_document_slug(document)}"

    if site and path:
        return f"{site.rstrip('/')}/{path.lstrip('/')}"

    return f"/documents/{extract_rkey(document.uri) or ''}"
