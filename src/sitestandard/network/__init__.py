"""Network layer: identity resolution, XRPC agents and endpoint fallback."""

from sitestandard.network.agent import (
    AgentFactory,
    RecordAgent,
    XrpcAgent,
    xrpc_agent_factory,
)
from sitestandard.network.fallback import FallbackExecutor
from sitestandard.network.identity import IdentityResolver

__all__ = [
    "AgentFactory",
    "FallbackExecutor",
    "IdentityResolver",
    "RecordAgent",
    "XrpcAgent",
    "xrpc_agent_factory",
]
