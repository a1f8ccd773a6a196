"""Cache layer for sitestandard.

Provides a process-local TTL cache shared by identity resolution and
record fetches:
- Lazy, per-entry expiry
- Scoped key schema (entity kind, DID, record key)
- Explicit instances, injected at construction
"""

from sitestandard.cache.keys import CacheKeys
from sitestandard.cache.ttl import DEFAULT_TTL, TTLCache

__all__ = [
    "CacheKeys",
    "DEFAULT_TTL",
    "TTLCache",
]
