"""Error hierarchy for sitestandard.

Only network- and resolution-layer failures are raised. Lower layers
(cache, AT-URI codec) report absence with ``None`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass


class SiteStandardError(Exception):
    """Base exception for all sitestandard errors."""


class ConfigurationError(SiteStandardError):
    """Required configuration is missing or invalid."""


class ResolutionError(SiteStandardError):
    """A DID could not be resolved to its home endpoint (PDS)."""

    def __init__(self, did: str, reason: str, status_code: int | None = None):
        self.did = did
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to resolve DID {did}: {reason}")


class XrpcError(SiteStandardError):
    """An XRPC endpoint answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        error: str | None = None,
        message: str | None = None,
        endpoint: str | None = None,
    ):
        self.status_code = status_code
        self.error = error
        self.message = message
        self.endpoint = endpoint
        detail = error or "XRPCError"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(f"XRPC request failed ({status_code}) {detail}")


@dataclass(frozen=True)
class EndpointAttempt:
    """One failed attempt against a single endpoint."""

    endpoint: str
    error: BaseException

    def to_dict(self) -> dict[str, str]:
        return {
            "endpoint": self.endpoint,
            "type": type(self.error).__name__,
            "message": str(self.error),
        }


class EndpointExhaustedError(SiteStandardError):
    """Both the home endpoint and the public fallback failed.

    ``attempts`` lists every endpoint tried, in order. ``last_error`` is the
    error of the final attempt (the public fallback).
    """

    def __init__(self, did: str, attempts: list[EndpointAttempt]):
        if not attempts:
            raise ValueError("EndpointExhaustedError requires at least one attempt")
        self.did = did
        self.attempts = list(attempts)
        super().__init__(
            f"All endpoints failed for {did}: "
            + "; ".join(f"{a.endpoint}: {a.error}" for a in self.attempts)
        )

    @property
    def last_error(self) -> BaseException:
        return self.attempts[-1].error

    @property
    def endpoints(self) -> list[str]:
        return [a.endpoint for a in self.attempts]


class PaginationError(SiteStandardError):
    """A paginated listing returned a cursor it had already returned."""

    def __init__(self, collection: str, cursor: str):
        self.collection = collection
        self.cursor = cursor
        super().__init__(f"Cursor {cursor!r} repeated while listing {collection}")

