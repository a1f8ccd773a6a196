"""site.standard.* lexicon models.

Typed views of the records stored under ``site.standard.publication`` and
``site.standard.document`` plus the envelopes and identities the read path
produces.

All models use Pydantic v2. Record values form a discriminated union on
``$type``; open-union fields (document ``content``) are carried as an
opaque payload that keeps unknown fields.
"""

from pydantic import BaseModel


class LexiconModel(BaseModel):
    """Base model for lexicon records and their parts.

    Note: unknown fields are ignored rather than forbidden, so records
    written against a newer lexicon revision still load.
    """

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


# Import order matters due to forward references - LexiconModel must be defined first
# ruff: noqa: E402
from sitestandard.core.model.envelope import ParsedAtUri, RawRecord, RecordEnvelope, RecordPage
from sitestandard.core.model.identity import ResolvedIdentity
from sitestandard.core.model.records import (
    DOCUMENT_COLLECTION,
    PUBLICATION_COLLECTION,
    BasicTheme,
    BlobRef,
    Document,
    OpaqueContent,
    Publication,
    PublicationPreferences,
    RecordValue,
    RGBColor,
    StrongRef,
)

__all__ = [
    "LexiconModel",
    # Collections
    "DOCUMENT_COLLECTION",
    "PUBLICATION_COLLECTION",
    # Records
    "BasicTheme",
    "BlobRef",
    "Document",
    "OpaqueContent",
    "Publication",
    "PublicationPreferences",
    "RecordValue",
    "RGBColor",
    "StrongRef",
    # Envelopes
    "ParsedAtUri",
    "RawRecord",
    "RecordEnvelope",
    "RecordPage",
    # Identity
    "ResolvedIdentity",
]
