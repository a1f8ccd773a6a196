"""Global pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from sitestandard.cache import TTLCache
from tests.fakes import HOME, PUBLIC, FakeAgent, FakeBackend, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(default_ttl=300.0, clock=clock)


@pytest.fixture
def home_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def public_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def agent_factory(home_backend: FakeBackend, public_backend: FakeBackend):
    """AgentFactory routing HOME and PUBLIC to their fake backends."""
    backends = {HOME: home_backend, PUBLIC: public_backend}

    def factory(service: str, _client: object) -> FakeAgent:
        return FakeAgent(service, backends[service])

    return factory


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SITE_STANDARD_* variables of the host out of Settings()."""
    import os

    for name in list(os.environ):
        if name.startswith("SITE_STANDARD_"):
            monkeypatch.delenv(name)
