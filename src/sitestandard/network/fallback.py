"""Dual-endpoint execution with public fallback.

Runs an operation against the repository's home endpoint first and, if
that fails for any reason (resolution included), once more against the
public AppView. Exactly two attempts, in fixed order, no backoff.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from sitestandard.config import DEFAULT_PUBLIC_FALLBACK_URL
from sitestandard.errors import EndpointAttempt, EndpointExhaustedError
from sitestandard.network.agent import AgentFactory, RecordAgent, xrpc_agent_factory
from sitestandard.network.identity import IdentityResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[RecordAgent], Awaitable[T]]

# Placeholder endpoint name used when resolution itself failed
UNRESOLVED_HOME = "<unresolved home endpoint>"


class FallbackExecutor:
    """Executes agent operations with home-then-public fallback."""

    def __init__(
        self,
        resolver: IdentityResolver,
        public_endpoint: str = DEFAULT_PUBLIC_FALLBACK_URL,
        agent_factory: AgentFactory = xrpc_agent_factory,
        home_endpoint: str | None = None,
        timeout: float = 10.0,
    ):
        """Initialize the executor.

        Args:
            resolver: Identity resolver used to find the home endpoint
            public_endpoint: Well-known public endpoint tried second
            agent_factory: Builds an agent for (endpoint, client)
            home_endpoint: Fixed home endpoint; skips resolution when set
            timeout: Timeout for clients created when the caller supplies none
        """
        self.resolver = resolver
        self.public_endpoint = public_endpoint
        self.agent_factory = agent_factory
        self.home_endpoint = home_endpoint
        self.timeout = timeout

    async def home_endpoint_for(self, did: str, client: httpx.AsyncClient | None = None) -> str:
        """Return the configured override, or the resolved PDS of ``did``."""
        if self.home_endpoint:
            return self.home_endpoint
        identity = await self.resolver.resolve(did, client)
        return identity.pds

    async def with_fallback(
        self,
        did: str,
        operation: Operation[T],
        client: httpx.AsyncClient | None = None,
    ) -> T:
        """Run ``operation`` against the home endpoint, then the public one.

        Args:
            did: Repository DID whose home endpoint is tried first
            operation: Coroutine function taking a RecordAgent
            client: HTTP client shared by both attempts

        Returns:
            Result of the first successful attempt

        Raises:
            EndpointExhaustedError: If both attempts failed; ``last_error``
                is the public endpoint's error
        """
        if client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as own_client:
                return await self._run(did, operation, own_client)
        return await self._run(did, operation, client)

    async def _run(self, did: str, operation: Operation[T], client: httpx.AsyncClient) -> T:
        attempts: list[EndpointAttempt] = []

        endpoint = self.home_endpoint or UNRESOLVED_HOME
        try:
            endpoint = await self.home_endpoint_for(did, client)
            return await operation(self.agent_factory(endpoint, client))
        except Exception as e:
            attempts.append(EndpointAttempt(endpoint=endpoint, error=e))
            logger.warning(
                f"Home endpoint {endpoint} failed for {did}, trying public fallback: {e}",
                extra={"endpoint": endpoint},
            )

        try:
            return await operation(self.agent_factory(self.public_endpoint, client))
        except Exception as e:
            attempts.append(EndpointAttempt(endpoint=self.public_endpoint, error=e))
            logger.error(
                f"Public fallback {self.public_endpoint} failed for {did}: {e}",
                extra={"endpoint": self.public_endpoint},
            )
            raise EndpointExhaustedError(did, attempts) from e
