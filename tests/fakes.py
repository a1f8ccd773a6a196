"""Test doubles: an in-memory record backend standing in for PDS / AppView
endpoints, and a manually advanced clock for cache expiry.
"""

from __future__ import annotations

import asyncio
from typing import Any

from sitestandard.core.model import RawRecord, RecordPage

DID = "did:plc:testrepo123"
HOME = "https://pds.example.com"
PUBLIC = "https://public.example.com"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """Records served by one endpoint.

    Pages are chained by cursor: the first page is served for cursor None,
    each following page for the cursor of the page before it.
    """

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.records: dict[tuple[str, str], RawRecord] = {}
        self.pages: dict[str, dict[str | None, RecordPage]] = {}
        self.calls: list[tuple[Any, ...]] = []
        # Raise on the n-th list_records call (1-based); None disables
        self.fail_on_list_call: int | None = None

    def add_record(self, collection: str, rkey: str, value: dict[str, Any], cid: str = "bafyrecord") -> None:
        self.records[(collection, rkey)] = RawRecord(
            uri=f"at://{DID}/{collection}/{rkey}", cid=cid, value=value
        )

    def add_pages(self, collection: str, pages: list[tuple[list[RawRecord], str | None]]) -> None:
        chained: dict[str | None, RecordPage] = {}
        previous: str | None = None
        for records, cursor in pages:
            chained[previous] = RecordPage(records=records, cursor=cursor)
            previous = cursor
        self.pages[collection] = chained

    def list_calls(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == "list_records"]


class FakeAgent:
    """RecordAgent backed by a FakeBackend."""

    def __init__(self, service: str, backend: FakeBackend) -> None:
        self.service = service
        self.backend = backend

    async def get_record(self, repo: str, collection: str, rkey: str) -> RawRecord | None:
        self.backend.calls.append(("get_record", repo, collection, rkey))
        await asyncio.sleep(0)
        if self.backend.error is not None:
            raise self.backend.error
        return self.backend.records.get((collection, rkey))

    async def list_records(
        self, repo: str, collection: str, limit: int, cursor: str | None = None
    ) -> RecordPage:
        self.backend.calls.append(("list_records", repo, collection, limit, cursor))
        await asyncio.sleep(0)
        if self.backend.error is not None:
            raise self.backend.error
        if self.backend.fail_on_list_call == len(self.backend.list_calls()):
            raise ConnectionError(f"{self.service} dropped the connection")
        return self.backend.pages.get(collection, {}).get(cursor, RecordPage())


def raw_document(rkey: str, published_at: str, site: str = "", **extra: Any) -> RawRecord:
    value: dict[str, Any] = {
        "$type": "site.standard.document",
        "site": site or f"at://{DID}/site.standard.publication/pub1",
        "title": f"Document {rkey}",
        "publishedAt": published_at,
        **extra,
    }
    return RawRecord(uri=f"at://{DID}/site.standard.document/{rkey}", cid=f"bafy{rkey}", value=value)


def raw_publication(rkey: str, **extra: Any) -> RawRecord:
    value: dict[str, Any] = {
        "$type": "site.standard.publication",
        "url": f"https://{rkey}.example.com",
        "name": f"Publication {rkey}",
        **extra,
    }
    return RawRecord(uri=f"at://{DID}/site.standard.publication/{rkey}", cid=f"bafy{rkey}", value=value)
