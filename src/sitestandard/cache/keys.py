"""Cache key schema for sitestandard.

Key format: {entity_type}:{did}[:{rkey}]

Where:
- entity_type: "identity", "publication", "publications", "document", "documents"
- did: repository DID (contains ':' itself, e.g. did:plc:abc)
- rkey: record key, or the literal "all" for a whole collection
"""

from __future__ import annotations

from typing import Literal, get_args

EntityType = Literal["identity", "publication", "publications", "document", "documents"]

ALL = "all"

_ENTITY_TYPES: tuple[str, ...] = get_args(EntityType)


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    @classmethod
    def identity(cls, did: str) -> str:
        """Key for a resolved identity."""
        return f"identity:{did}"

    @classmethod
    def publication(cls, did: str, rkey: str) -> str:
        """Key for a single publication envelope."""
        return f"publication:{did}:{rkey}"

    @classmethod
    def all_publications(cls, did: str) -> str:
        """Key for the full publication list of a repository."""
        return f"publications:{did}:{ALL}"

    @classmethod
    def document(cls, did: str, rkey: str) -> str:
        """Key for a single document envelope."""
        return f"document:{did}:{rkey}"

    @classmethod
    def all_documents(cls, did: str) -> str:
        """Key for the full, sorted document list of a repository."""
        return f"documents:{did}:{ALL}"

    @classmethod
    def parse_key(cls, key: str) -> dict[str, str] | None:
        """Parse a cache key into its components.

        Record keys never contain ':', so the last segment of a record key
        is split off from the right; everything between is the DID.

        Returns:
            Dict with entity_type, did and (for records) rkey, or None
        """
        entity_type, sep, rest = key.partition(":")
        if not sep or entity_type not in _ENTITY_TYPES or not rest.startswith("did:"):
            return None

        if entity_type == "identity":
            return {"entity_type": entity_type, "did": rest}

        did, sep, rkey = rest.rpartition(":")
        if not sep or not rkey or did.count(":") < 2:
            return None
        return {"entity_type": entity_type, "did": did, "rkey": rkey}
