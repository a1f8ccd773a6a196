"""Resolved repository identity."""

from __future__ import annotations

from pydantic import Field

from sitestandard.core.model import LexiconModel


class ResolvedIdentity(LexiconModel):
    """A DID together with the home endpoint (PDS) currently hosting it.

    Immutable once resolved; a new instance is produced when the cached
    one expires and the DID is resolved again.
    """

    model_config = {**LexiconModel.model_config, "frozen": True}

    did: str = Field(..., description="Decentralized identifier of the repository")
    pds: str = Field(..., description="Home endpoint base URL")
    handle: str | None = Field(default=None, description="Handle, if the resolver returned one")
