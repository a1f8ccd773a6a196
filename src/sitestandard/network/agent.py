"""Network agents for reading repository records over XRPC.

An agent is bound to one endpoint (a PDS or the public AppView) and
exposes the two repository reads the record layer needs:
- com.atproto.repo.getRecord
- com.atproto.repo.listRecords
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import httpx

from sitestandard.core.model import RawRecord, RecordPage
from sitestandard.errors import XrpcError

logger = logging.getLogger(__name__)

GET_RECORD = "com.atproto.repo.getRecord"
LIST_RECORDS = "com.atproto.repo.listRecords"

# XRPC error names that mean "the record is not there"
_NOT_FOUND_ERRORS = frozenset({"RecordNotFound", "NotFound"})


@runtime_checkable
class RecordAgent(Protocol):
    """Read capability against a single endpoint."""

    service: str

    async def get_record(self, repo: str, collection: str, rkey: str) -> RawRecord | None:
        """Fetch one record; None when the endpoint reports it does not exist."""
        ...

    async def list_records(
        self,
        repo: str,
        collection: str,
        limit: int,
        cursor: str | None = None,
    ) -> RecordPage:
        """Fetch one page of a collection."""
        ...


AgentFactory = Callable[[str, httpx.AsyncClient], RecordAgent]


class XrpcAgent:
    """RecordAgent over plain XRPC HTTP calls.

    The HTTP client is supplied by the caller and is not closed here.
    """

    def __init__(self, service: str, client: httpx.AsyncClient):
        self.service = service.rstrip("/")
        self.client = client

    def _url(self, method: str) -> str:
        return f"{self.service}/xrpc/{method}"

    async def get_record(self, repo: str, collection: str, rkey: str) -> RawRecord | None:
        response = await self.client.get(
            self._url(GET_RECORD),
            params={"repo": repo, "collection": collection, "rkey": rkey},
        )

        if response.status_code != 200:
            error = self._error_from(response)
            if error.error in _NOT_FOUND_ERRORS:
                logger.debug(f"Record {collection}/{rkey} not found on {self.service}")
                return None
            raise error

        return RawRecord.model_validate(self._json(response))

    async def list_records(
        self,
        repo: str,
        collection: str,
        limit: int,
        cursor: str | None = None,
    ) -> RecordPage:
        params: dict[str, Any] = {"repo": repo, "collection": collection, "limit": limit}
        if cursor:
            params["cursor"] = cursor

        response = await self.client.get(self._url(LIST_RECORDS), params=params)
        if response.status_code != 200:
            raise self._error_from(response)

        return RecordPage.model_validate(self._json(response))

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise XrpcError(
                response.status_code,
                "InvalidResponse",
                f"Response body is not JSON: {e}",
                endpoint=self.service,
            ) from e
        if not isinstance(data, dict):
            raise XrpcError(
                response.status_code,
                "InvalidResponse",
                "Response body is not a JSON object",
                endpoint=self.service,
            )
        return data

    def _error_from(self, response: httpx.Response) -> XrpcError:
        error: str | None = None
        message: str | None = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            message = body.get("message")
        return XrpcError(
            response.status_code,
            error,
            message or response.reason_phrase or None,
            endpoint=self.service,
        )


def xrpc_agent_factory(service: str, client: httpx.AsyncClient) -> RecordAgent:
    """Default AgentFactory: an XrpcAgent sharing the caller's client."""
    return XrpcAgent(service, client)
