"""Raw record to envelope assembly.

Turns backend records into typed RecordEnvelopes and replaces blob
references with fetchable getBlob URLs.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from sitestandard.core.model import (
    DOCUMENT_COLLECTION,
    PUBLICATION_COLLECTION,
    BlobRef,
    Document,
    Publication,
    RawRecord,
    RecordEnvelope,
)

logger = logging.getLogger(__name__)

EndpointProvider = Callable[[], Awaitable[str]]


def build_blob_url(pds: str, did: str, cid: str) -> str:
    """Build the getBlob URL for a blob stored on a PDS.

    Args:
        pds: PDS endpoint; a trailing slash is ignored
        did: Repository DID
        cid: Blob CID

    Returns:
        Full blob URL
    """
    return (
        f"{pds.rstrip('/')}/xrpc/com.atproto.sync.getBlob"
        f"?did={quote(did, safe='')}&cid={quote(cid, safe='')}"
    )


class BlobUrlResolver:
    """Materializes blob references into URLs on the repository's PDS.

    Never raises: a reference without a CID, or a PDS that cannot be
    determined, yields None and a warning.
    """

    def __init__(self, did: str, endpoint: EndpointProvider):
        self.did = did
        self._endpoint = endpoint
        self._pds: str | None = None
        self._endpoint_failed = False

    async def url_for(self, blob: Any) -> str | None:
        if not blob:
            return None
        try:
            cid = BlobRef.model_validate(blob).content_id if isinstance(blob, dict) else None
            if not cid:
                logger.warning(f"Blob reference without CID in {self.did}: {blob!r}")
                return None
            pds = await self._pds_endpoint()
            if pds is None:
                return None
            return build_blob_url(pds, self.did, cid)
        except Exception as e:
            logger.warning(f"Failed to resolve blob URL for {self.did}: {e}")
            return None

    async def _pds_endpoint(self) -> str | None:
        # One lookup per resolver; a failed lookup is not retried for every blob
        if self._pds is None and not self._endpoint_failed:
            try:
                self._pds = await self._endpoint()
            except Exception as e:
                self._endpoint_failed = True
                logger.warning(f"Cannot determine PDS for blob URLs of {self.did}: {e}")
        return self._pds


async def to_publication(raw: RawRecord, blobs: BlobUrlResolver) -> RecordEnvelope[Publication]:
    """Assemble a publication envelope, materializing ``icon``."""
    value = dict(raw.value or {})
    value["$type"] = PUBLICATION_COLLECTION
    value["icon"] = await blobs.url_for(value.get("icon"))
    return _envelope(raw, Publication, value)


async def to_document(raw: RawRecord, blobs: BlobUrlResolver) -> RecordEnvelope[Document]:
    """Assemble a document envelope, materializing ``coverImage``."""
    value = dict(raw.value or {})
    value["$type"] = DOCUMENT_COLLECTION
    value["coverImage"] = await blobs.url_for(value.get("coverImage"))
    return _envelope(raw, Document, value)


def _envelope(raw: RawRecord, model: type[Any], value: dict[str, Any]) -> RecordEnvelope[Any]:
    """Validate ``value`` into ``model``, dropping malformed fields.

    Every value field is optional, so removing the top-level fields that
    failed validation always leaves a loadable record.
    """
    try:
        typed = model.model_validate(value)
    except ValidationError as e:
        malformed = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        logger.warning(
            f"Dropping malformed fields of {raw.uri}: {', '.join(sorted(malformed))}",
            extra={"uri": raw.uri},
        )
        typed = model.model_validate({k: v for k, v in value.items() if k not in malformed})
    return RecordEnvelope[model](uri=raw.uri, cid=raw.cid or "", value=typed)
