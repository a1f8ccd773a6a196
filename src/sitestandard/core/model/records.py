"""site.standard publication and document record values.

Blob fields (publication ``icon``, document ``coverImage``) hold the
materialized blob URL, not the raw blob reference.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field

from sitestandard.core.model import LexiconModel

PUBLICATION_COLLECTION = "site.standard.publication"
DOCUMENT_COLLECTION = "site.standard.document"


class RGBColor(LexiconModel):
    """RGB color. Channels are nominally 0-255 but kept as written."""

    r: int | None = None
    g: int | None = None
    b: int | None = None


class BasicTheme(LexiconModel):
    """Basic color theme attached to a publication."""

    type: str | None = Field(default=None, alias="$type")
    background: RGBColor | None = None
    foreground: RGBColor | None = None
    accent: RGBColor | None = None
    accent_foreground: RGBColor | None = Field(default=None, alias="accentForeground")


class PublicationPreferences(LexiconModel):
    show_in_discover: bool | None = Field(default=None, alias="showInDiscover")


class StrongRef(LexiconModel):
    """Reference to a specific version of another record."""

    uri: str | None = None
    cid: str | None = None


class BlobRef(LexiconModel):
    """Reference to a content-addressed blob.

    Current records carry ``ref.$link``; legacy records carry a bare ``cid``.
    """

    type: str | None = Field(default=None, alias="$type")
    ref: dict[str, Any] | None = None
    cid: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    size: int | None = None

    @property
    def content_id(self) -> str | None:
        """The blob CID, or None when the reference carries none."""
        if self.ref:
            link = self.ref.get("$link")
            if isinstance(link, str) and link:
                return link
        return self.cid or None


class OpaqueContent(LexiconModel):
    """Open-union payload whose shape this package does not interpret.

    The ``$type`` tag is kept when present and every other field is
    preserved as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = Field(default=None, alias="$type")


class Publication(LexiconModel):
    """A ``site.standard.publication`` record."""

    record_type: Literal["site.standard.publication"] = Field(
        default=PUBLICATION_COLLECTION, alias="$type"
    )
    url: str | None = None
    name: str | None = None
    icon: str | None = Field(default=None, description="Resolved blob URL of the icon")
    description: str | None = None
    basic_theme: BasicTheme | None = Field(default=None, alias="basicTheme")
    preferences: PublicationPreferences | None = None


class Document(LexiconModel):
    """A ``site.standard.document`` record.

    ``content`` is an open union: objects load as OpaqueContent, any other
    JSON value is kept unchanged.
    """

    record_type: Literal["site.standard.document"] = Field(
        default=DOCUMENT_COLLECTION, alias="$type"
    )
    site: str | None = Field(default=None, description="AT-URI of the publication, or an HTTPS URL")
    title: str | None = None
    path: str | None = None
    description: str | None = None
    cover_image: str | None = Field(
        default=None, alias="coverImage", description="Resolved blob URL of the cover image"
    )
    content: Annotated[OpaqueContent | Any, Field(union_mode="left_to_right")] = None
    text_content: str | None = Field(default=None, alias="textContent")
    bsky_post_ref: StrongRef | None = Field(default=None, alias="bskyPostRef")
    tags: list[str] | None = None
    published_at: datetime | None = Field(default=None, alias="publishedAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


RecordValue = Annotated[Publication | Document, Field(discriminator="record_type")]
