"""DID to home endpoint resolution.

Resolves a DID through a mini-doc resolver service and caches the result
for the cache's default TTL. Failures are not retried here; the fallback
executor decides what to do next.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson
from pydantic import ValidationError

from sitestandard.cache import CacheKeys, TTLCache
from sitestandard.config import DEFAULT_RESOLVER_URL
from sitestandard.core.model import ResolvedIdentity
from sitestandard.errors import ResolutionError

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves DIDs to ResolvedIdentity, cache first."""

    def __init__(
        self,
        cache: TTLCache,
        resolver_url: str = DEFAULT_RESOLVER_URL,
        timeout: float = 10.0,
    ):
        self.cache = cache
        self.resolver_url = resolver_url
        self.timeout = timeout

    async def resolve(self, did: str, client: httpx.AsyncClient | None = None) -> ResolvedIdentity:
        """Resolve a DID to its home endpoint.

        Args:
            did: DID to resolve
            client: HTTP client to use; a short-lived one is created if omitted

        Returns:
            Resolved identity with PDS endpoint

        Raises:
            ResolutionError: If the resolver fails or answers without did/pds
        """
        cache_key = CacheKeys.identity(did)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as own_client:
                identity = await self._fetch(did, own_client)
        else:
            identity = await self._fetch(did, client)

        self.cache.set(cache_key, identity)
        logger.info(f"Resolved {did} to {identity.pds}")
        return identity

    async def _fetch(self, did: str, client: httpx.AsyncClient) -> ResolvedIdentity:
        response = await client.get(self.resolver_url, params={"identifier": did})

        if not response.is_success:
            raise ResolutionError(
                did,
                f"{response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
            )

        try:
            data: Any = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ResolutionError(did, f"invalid JSON from resolver: {e}") from e

        if not isinstance(data, dict) or not data.get("did") or not data.get("pds"):
            raise ResolutionError(did, "invalid response from identity resolver")

        try:
            return ResolvedIdentity(did=data["did"], pds=data["pds"], handle=data.get("handle"))
        except ValidationError as e:
            raise ResolutionError(did, "invalid response from identity resolver") from e
