from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sitestandard.errors import ConfigurationError

DEFAULT_RESOLVER_URL = (
    "https://slingshot.microcosm.blue/xrpc/com.bad-example.identity.resolveMiniDoc"
)
DEFAULT_PUBLIC_FALLBACK_URL = "https://public.api.bsky.app"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SITE_STANDARD_", env_file=".env", extra="ignore", populate_by_name=True
    )

    # Repository to read from
    did: str | None = Field(default=None, validation_alias="SITE_STANDARD_DID")
    # Optional home endpoint override; skips identity resolution when set
    pds: str | None = Field(default=None, validation_alias="SITE_STANDARD_PDS")

    # Cache (milliseconds, 5 minutes default)
    cache_ttl_ms: int = Field(default=300_000, ge=0, validation_alias="SITE_STANDARD_CACHE_TTL")
    coalesce_requests: bool = Field(default=True, validation_alias="SITE_STANDARD_COALESCE")

    # Endpoints
    resolver_url: str = Field(
        default=DEFAULT_RESOLVER_URL, validation_alias="SITE_STANDARD_RESOLVER_URL"
    )
    public_fallback_url: str = Field(
        default=DEFAULT_PUBLIC_FALLBACK_URL, validation_alias="SITE_STANDARD_PUBLIC_URL"
    )

    # HTTP
    http_timeout: float = Field(default=10.0, gt=0, validation_alias="SITE_STANDARD_HTTP_TIMEOUT")
    page_size: int = Field(default=100, ge=1, le=100, validation_alias="SITE_STANDARD_PAGE_SIZE")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="SITE_STANDARD_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="SITE_STANDARD_LOG_JSON")

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_ms / 1000

    def require_did(self) -> str:
        """Return the configured DID or raise ConfigurationError."""
        if not self.did:
            raise ConfigurationError(
                "Missing required setting: SITE_STANDARD_DID"
            )
        if not self.did.startswith("did:"):
            raise ConfigurationError(f"SITE_STANDARD_DID is not a DID: {self.did}")
        return self.did


settings = Settings()
