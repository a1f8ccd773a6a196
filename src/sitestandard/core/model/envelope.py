"""Record envelopes and raw backend shapes."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from sitestandard.core.model import LexiconModel

T = TypeVar("T")


class RecordEnvelope(BaseModel, Generic[T]):
    """Caller-facing record: its AT-URI, content id and typed value.

    ``cid`` is empty when the backend omitted it.
    """

    model_config = {"populate_by_name": True}

    uri: str
    cid: str = ""
    value: T


class RawRecord(LexiconModel):
    """A record as returned by getRecord/listRecords, value still untyped."""

    uri: str
    cid: str | None = None
    value: dict[str, Any] | None = None


class RecordPage(LexiconModel):
    """One page of a listRecords response."""

    records: list[RawRecord] = Field(default_factory=list)
    cursor: str | None = None


class ParsedAtUri(LexiconModel):
    """Components of an ``at://{did}/{collection}/{rkey}`` URI."""

    model_config = {**LexiconModel.model_config, "frozen": True}

    did: str
    collection: str
    rkey: str
