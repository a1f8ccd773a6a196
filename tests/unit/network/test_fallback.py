"""Tests for home-then-public fallback execution."""

from unittest.mock import AsyncMock

import httpx
import pytest

from sitestandard.core.model import ResolvedIdentity
from sitestandard.errors import EndpointExhaustedError, ResolutionError
from sitestandard.network.agent import RecordAgent
from sitestandard.network.fallback import UNRESOLVED_HOME, FallbackExecutor
from tests.fakes import DID, HOME, PUBLIC


def make_resolver(pds: str = HOME) -> AsyncMock:
    resolver = AsyncMock()
    resolver.resolve.return_value = ResolvedIdentity(did=DID, pds=pds)
    return resolver


def recording_factory(services: list[str]):
    def factory(service: str, _client: httpx.AsyncClient) -> RecordAgent:
        services.append(service)
        agent = AsyncMock()
        agent.service = service
        return agent

    return factory


def failing_on(*failing: str):
    """Operation that fails on the given endpoints and returns the endpoint otherwise."""

    async def operation(agent: RecordAgent) -> str:
        if agent.service in failing:
            raise ConnectionError(f"{agent.service} unavailable")
        return agent.service

    return operation


@pytest.fixture
async def client():
    async with httpx.AsyncClient() as c:
        yield c


class TestWithFallback:
    """Test FallbackExecutor.with_fallback."""

    async def test_home_success_skips_public(self, client: httpx.AsyncClient) -> None:
        services: list[str] = []
        executor = FallbackExecutor(make_resolver(), PUBLIC, recording_factory(services))

        result = await executor.with_fallback(DID, failing_on(), client)

        assert result == HOME
        assert services == [HOME]

    async def test_home_failure_falls_back_to_public(self, client: httpx.AsyncClient) -> None:
        services: list[str] = []
        executor = FallbackExecutor(make_resolver(), PUBLIC, recording_factory(services))

        result = await executor.with_fallback(DID, failing_on(HOME), client)

        assert result == PUBLIC
        assert services == [HOME, PUBLIC]

    async def test_both_failing_raises_exhausted(self, client: httpx.AsyncClient) -> None:
        executor = FallbackExecutor(make_resolver(), PUBLIC, recording_factory([]))

        with pytest.raises(EndpointExhaustedError) as exc_info:
            await executor.with_fallback(DID, failing_on(HOME, PUBLIC), client)

        error = exc_info.value
        assert error.did == DID
        assert error.endpoints == [HOME, PUBLIC]
        assert str(error.last_error) == f"{PUBLIC} unavailable"
        assert error.__cause__ is error.last_error
        assert str(error.attempts[0].error) == f"{HOME} unavailable"

    async def test_resolution_failure_counts_as_home_failure(
        self, client: httpx.AsyncClient
    ) -> None:
        services: list[str] = []
        resolver = AsyncMock()
        resolver.resolve.side_effect = ResolutionError(DID, "resolver down")
        executor = FallbackExecutor(resolver, PUBLIC, recording_factory(services))

        result = await executor.with_fallback(DID, failing_on(), client)

        assert result == PUBLIC
        assert services == [PUBLIC]

    async def test_resolution_and_public_failure(self, client: httpx.AsyncClient) -> None:
        resolver = AsyncMock()
        resolver.resolve.side_effect = ResolutionError(DID, "resolver down")
        executor = FallbackExecutor(resolver, PUBLIC, recording_factory([]))

        with pytest.raises(EndpointExhaustedError) as exc_info:
            await executor.with_fallback(DID, failing_on(PUBLIC), client)

        first = exc_info.value.attempts[0]
        assert first.endpoint == UNRESOLVED_HOME
        assert isinstance(first.error, ResolutionError)

    async def test_home_override_skips_resolver(self, client: httpx.AsyncClient) -> None:
        services: list[str] = []
        resolver = make_resolver(pds="https://resolved.example.com")
        executor = FallbackExecutor(
            resolver, PUBLIC, recording_factory(services), home_endpoint=HOME
        )

        assert await executor.with_fallback(DID, failing_on(), client) == HOME
        assert await executor.home_endpoint_for(DID) == HOME
        resolver.resolve.assert_not_called()

    async def test_resolver_receives_shared_client(self, client: httpx.AsyncClient) -> None:
        resolver = make_resolver()
        executor = FallbackExecutor(resolver, PUBLIC, recording_factory([]))

        await executor.with_fallback(DID, failing_on(), client)

        resolver.resolve.assert_awaited_once_with(DID, client)

    async def test_each_call_makes_exactly_two_attempts(self, client: httpx.AsyncClient) -> None:
        services: list[str] = []
        executor = FallbackExecutor(make_resolver(), PUBLIC, recording_factory(services))

        for _ in range(2):
            with pytest.raises(EndpointExhaustedError):
                await executor.with_fallback(DID, failing_on(HOME, PUBLIC), client)

        assert services == [HOME, PUBLIC, HOME, PUBLIC]
