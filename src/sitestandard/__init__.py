"""sitestandard: resilient reads of site.standard publications and documents.

Usage:
    from sitestandard import create_client
    from sitestandard.config import Settings

    client = create_client(Settings(did="did:plc:abc123"))
    documents = await client.fetch_all_documents()
"""

from sitestandard.cache import CacheKeys, TTLCache
from sitestandard.config import Settings
from sitestandard.core.at_uri import at_uri_to_https, build_at_uri, extract_rkey, is_at_uri, parse_at_uri
from sitestandard.core.documents import get_document_slug, get_document_url
from sitestandard.core.model import (
    Document,
    ParsedAtUri,
    Publication,
    RecordEnvelope,
    ResolvedIdentity,
)
from sitestandard.errors import (
    ConfigurationError,
    EndpointAttempt,
    EndpointExhaustedError,
    PaginationError,
    ResolutionError,
    SiteStandardError,
    XrpcError,
)
from sitestandard.network import FallbackExecutor, IdentityResolver, XrpcAgent
from sitestandard.records import RecordRepository, build_blob_url, create_client

__version__ = "0.1.0"

__all__ = [
    # Client
    "RecordRepository",
    "create_client",
    "Settings",
    # Building blocks
    "CacheKeys",
    "FallbackExecutor",
    "IdentityResolver",
    "TTLCache",
    "XrpcAgent",
    # Models
    "Document",
    "ParsedAtUri",
    "Publication",
    "RecordEnvelope",
    "ResolvedIdentity",
    # AT-URI and URL helpers
    "at_uri_to_https",
    "build_at_uri",
    "build_blob_url",
    "extract_rkey",
    "get_document_slug",
    "get_document_url",
    "is_at_uri",
    "parse_at_uri",
    # Errors
    "ConfigurationError",
    "EndpointAttempt",
    "EndpointExhaustedError",
    "PaginationError",
    "ResolutionError",
    "SiteStandardError",
    "XrpcError",
]
