"""Record layer: repository facade and envelope assembly."""

from sitestandard.records.repository import PAGE_SIZE, RecordRepository, create_client
from sitestandard.records.transform import BlobUrlResolver, build_blob_url

__all__ = [
    "BlobUrlResolver",
    "PAGE_SIZE",
    "RecordRepository",
    "build_blob_url",
    "create_client",
]
