"""Record repository: cached, fallback-aware reads of site.standard records.

Read path for one repository (DID):

    cache lookup -> FallbackExecutor -> IdentityResolver -> agent call
        -> blob URL materialization -> cache store

Records are never written; absent records are never cached.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, TypeVar

import httpx

from sitestandard.cache import CacheKeys, TTLCache
from sitestandard.config import Settings
from sitestandard.config import settings as default_settings
from sitestandard.core.at_uri import parse_at_uri
from sitestandard.core.model import (
    DOCUMENT_COLLECTION,
    PUBLICATION_COLLECTION,
    Document,
    Publication,
    RawRecord,
    RecordEnvelope,
    RecordPage,
)
from sitestandard.errors import PaginationError
from sitestandard.network.agent import AgentFactory, RecordAgent, xrpc_agent_factory
from sitestandard.network.fallback import FallbackExecutor
from sitestandard.network.identity import IdentityResolver
from sitestandard.observability.logging import LogContext
from sitestandard.records.transform import BlobUrlResolver, to_document, to_publication

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_SIZE = 100

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)

Transform = Callable[[RawRecord, BlobUrlResolver], Awaitable[RecordEnvelope[Any]]]


class RecordRepository:
    """Reads publications and documents of a single repository.

    All reads share the injected cache. Concurrent reads of the same
    uncached key share one in-flight load when ``coalesce`` is enabled.
    """

    def __init__(
        self,
        did: str,
        cache: TTLCache,
        executor: FallbackExecutor,
        page_size: int = PAGE_SIZE,
        coalesce: bool = True,
    ):
        self.did = did
        self.cache = cache
        self.executor = executor
        self.page_size = page_size
        self.coalesce = coalesce
        self._inflight: dict[str, asyncio.Future[Any]] = {}

    # -------------------------------------------------------------------------
    # Publications
    # -------------------------------------------------------------------------

    async def fetch_publication(
        self, rkey: str, client: httpx.AsyncClient | None = None
    ) -> RecordEnvelope[Publication] | None:
        """Fetch a single publication by record key.

        Returns:
            Publication envelope, or None if the record does not exist
        """
        return await self._cached(
            CacheKeys.publication(self.did, rkey),
            lambda: self._fetch_one(PUBLICATION_COLLECTION, rkey, to_publication, client),
        )

    async def fetch_all_publications(
        self, client: httpx.AsyncClient | None = None
    ) -> list[RecordEnvelope[Publication]]:
        """Fetch every publication of the repository, in server order."""
        return await self._cached(
            CacheKeys.all_publications(self.did),
            lambda: self._fetch_all(PUBLICATION_COLLECTION, to_publication, client),
        )

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    async def fetch_document(
        self, rkey: str, client: httpx.AsyncClient | None = None
    ) -> RecordEnvelope[Document] | None:
        """Fetch a single document by record key.

        Returns:
            Document envelope, or None if the record does not exist
        """
        return await self._cached(
            CacheKeys.document(self.did, rkey),
            lambda: self._fetch_one(DOCUMENT_COLLECTION, rkey, to_document, client),
        )

    async def fetch_all_documents(
        self, client: httpx.AsyncClient | None = None
    ) -> list[RecordEnvelope[Document]]:
        """Fetch every document of the repository, newest first, undated last."""

        async def load() -> list[RecordEnvelope[Document]]:
            documents = await self._fetch_all(DOCUMENT_COLLECTION, to_document, client)
            documents.sort(key=_published_sort_key, reverse=True)
            return documents

        return await self._cached(CacheKeys.all_documents(self.did), load)

    async def fetch_documents_by_publication(
        self, publication_uri: str, client: httpx.AsyncClient | None = None
    ) -> list[RecordEnvelope[Document]]:
        """Documents whose ``site`` is the given publication URI.

        Filters the full (possibly cached) document list; issues no
        request of its own.
        """
        documents = await self.fetch_all_documents(client)
        return [doc for doc in documents if doc.value.site == publication_uri]

    # -------------------------------------------------------------------------
    # Generic
    # -------------------------------------------------------------------------

    async def fetch_by_at_uri(
        self, uri: str, client: httpx.AsyncClient | None = None
    ) -> RecordEnvelope[Publication] | RecordEnvelope[Document] | None:
        """Fetch a record by AT-URI, dispatching on its collection.

        Returns None for invalid URIs and unsupported collections.
        """
        parsed = parse_at_uri(uri)
        if parsed is None:
            logger.warning(f"Invalid AT-URI: {uri}")
            return None

        if parsed.did != self.did:
            logger.debug(f"AT-URI {uri} belongs to {parsed.did}, reading {self.did} by rkey")

        if parsed.collection == PUBLICATION_COLLECTION:
            return await self.fetch_publication(parsed.rkey, client)
        if parsed.collection == DOCUMENT_COLLECTION:
            return await self.fetch_document(parsed.rkey, client)

        logger.debug(f"Unsupported collection in AT-URI: {parsed.collection}")
        return None

    async def get_pds(self, client: httpx.AsyncClient | None = None) -> str:
        """Home endpoint of the repository (override or resolved).

        Resolution goes through the identity cache, so the endpoint is
        re-resolved only after the cached identity expires.
        """
        return await self.executor.home_endpoint_for(self.did, client)

    def clear_cache(self) -> None:
        """Clear the whole injected cache, identities included."""
        self.cache.clear()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _cached(self, key: str, load: Callable[[], Awaitable[T]]) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not self.coalesce:
            return await self._load_and_store(key, load)

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._load_and_store(key, load))
            self._inflight[key] = pending
            pending.add_done_callback(lambda done: self._forget(key, done))
        # Shielded so one cancelled caller does not cancel the shared load
        return await asyncio.shield(pending)

    def _forget(self, key: str, done: asyncio.Future[Any]) -> None:
        if self._inflight.get(key) is done:
            del self._inflight[key]
        # Mark a failure as retrieved even when every waiter was cancelled
        if not done.cancelled():
            done.exception()

    async def _load_and_store(self, key: str, load: Callable[[], Awaitable[T]]) -> T:
        value = await load()
        if value is not None:
            self.cache.set(key, value)
        return value

    @asynccontextmanager
    async def _client_scope(self, client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
        if client is not None:
            yield client
            return
        async with httpx.AsyncClient(timeout=self.executor.timeout) as own_client:
            yield own_client

    def _blobs(self, client: httpx.AsyncClient) -> BlobUrlResolver:
        return BlobUrlResolver(self.did, lambda: self.get_pds(client))

    async def _fetch_one(
        self,
        collection: str,
        rkey: str,
        transform: Transform,
        client: httpx.AsyncClient | None,
    ) -> RecordEnvelope[Any] | None:
        with LogContext(did=self.did, operation=f"get:{collection}"):
            async with self._client_scope(client) as http:

                async def get(agent: RecordAgent) -> RawRecord | None:
                    return await agent.get_record(self.did, collection, rkey)

                raw = await self.executor.with_fallback(self.did, get, http)
                if raw is None or not raw.value:
                    logger.info(f"Record {collection}/{rkey} not found")
                    return None
                return await transform(raw, self._blobs(http))

    def _list_page(
        self, collection: str, cursor: str | None
    ) -> Callable[[RecordAgent], Awaitable[RecordPage]]:
        async def list_page(agent: RecordAgent) -> RecordPage:
            return await agent.list_records(self.did, collection, self.page_size, cursor)

        return list_page

    async def _fetch_all(
        self,
        collection: str,
        transform: Transform,
        client: httpx.AsyncClient | None,
    ) -> list[RecordEnvelope[Any]]:
        with LogContext(did=self.did, operation=f"list:{collection}"):
            async with self._client_scope(client) as http:
                blobs = self._blobs(http)
                records: list[RecordEnvelope[Any]] = []
                seen_cursors: set[str] = set()
                cursor: str | None = None
                pages = 0

                while True:
                    page = await self.executor.with_fallback(
                        self.did, self._list_page(collection, cursor), http
                    )
                    pages += 1

                    for raw in page.records:
                        records.append(await transform(raw, blobs))

                    if not page.cursor:
                        break
                    if page.cursor in seen_cursors:
                        raise PaginationError(collection, page.cursor)
                    seen_cursors.add(page.cursor)
                    cursor = page.cursor

                logger.info(f"Fetched {len(records)} {collection} records in {pages} page(s)")
                return records


def _published_sort_key(document: RecordEnvelope[Document]) -> tuple[bool, datetime]:
    # Undated documents sort after every dated one when reversed
    published = document.value.published_at
    if published is None:
        return (False, _UNDATED)
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return (True, published)


def create_client(
    config: Settings | None = None,
    *,
    cache: TTLCache | None = None,
    agent_factory: AgentFactory = xrpc_agent_factory,
) -> RecordRepository:
    """Build a RecordRepository from settings.

    Each client gets its own cache unless one is passed in, so clients for
    different DIDs never share entries or default TTLs by accident.

    Args:
        config: Settings to use (module settings if omitted)
        cache: Cache to share; a new one is created if omitted
        agent_factory: Builds agents per endpoint

    Raises:
        ConfigurationError: If no DID is configured
    """
    config = config or default_settings
    did = config.require_did()

    cache = cache if cache is not None else TTLCache(default_ttl=config.cache_ttl_seconds)
    resolver = IdentityResolver(cache, resolver_url=config.resolver_url, timeout=config.http_timeout)
    executor = FallbackExecutor(
        resolver,
        public_endpoint=config.public_fallback_url,
        agent_factory=agent_factory,
        home_endpoint=config.pds,
        timeout=config.http_timeout,
    )
    return RecordRepository(
        did,
        cache,
        executor,
        page_size=config.page_size,
        coalesce=config.coalesce_requests,
    )
