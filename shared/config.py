"""
Shared configuration management for the HollyMarket Access Gateway.
"""

from typing import List, Literal, Optional

from pydantic import AnyHttpUrl, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised at startup when the environment cannot produce valid settings."""


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: Literal["development", "production", "test"] = Field(default="development")
    log_level: str = Field(default="info")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    api_version: str = Field(default="v1", min_length=1)
    shutdown_grace_seconds: int = Field(default=10, ge=0)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def api_prefix(self) -> str:
        return f"/api/{self.api_version}"


class GatewaySettings(BaseConfig):
    """Gateway configuration: auth provider, Polymarket upstreams, CORS and signing."""

    # Auth provider (Supabase GoTrue)
    supabase_url: AnyHttpUrl
    supabase_anon_key: str = Field(min_length=1)
    supabase_service_role_key: str = Field(min_length=1)

    # Polymarket
    polymarket_api_url: AnyHttpUrl = Field(default="https://gamma-api.polymarket.com")
    polymarket_clob_api_url: AnyHttpUrl = Field(default="https://clob.polymarket.com")
    polymarket_chain_id: int = Field(default=137)
    upstream_timeout_seconds: float = Field(default=15.0, gt=0)
    comments_timeout_seconds: float = Field(default=10.0, gt=0)

    # Builder attribution signing
    builder_signing_enabled: bool = Field(default=False)
    polymarket_builder_api_key: Optional[str] = None
    polymarket_builder_secret: Optional[str] = None
    polymarket_builder_passphrase: Optional[str] = None

    # CORS
    allowed_origins: str = Field(default="http://localhost:3000")

    # Rate limiting
    rate_limit_window_ms: int = Field(default=900000, ge=1)
    rate_limit_max_requests: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _require_builder_credentials(self) -> "GatewaySettings":
        if self.builder_signing_enabled:
            missing = [
                name for name in (
                    "polymarket_builder_api_key",
                    "polymarket_builder_secret",
                    "polymarket_builder_passphrase",
                )
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    "builder signing is enabled but credentials are missing: "
                    + ", ".join(name.upper() for name in missing)
                )
        return self

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def supabase_base_url(self) -> str:
        return str(self.supabase_url).rstrip("/")

    @property
    def gamma_base_url(self) -> str:
        return str(self.polymarket_api_url).rstrip("/")

    @property
    def clob_base_url(self) -> str:
        return str(self.polymarket_clob_api_url).rstrip("/")

    @property
    def builder_configured(self) -> bool:
        return bool(
            self.polymarket_builder_api_key
            and self.polymarket_builder_secret
            and self.polymarket_builder_passphrase
        )


def _offending_keys(exc: ValidationError) -> List[str]:
    keys: List[str] = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "__root__"]
        if loc:
            key = loc[0].upper()
        else:
            # Model-level validators report the keys in their message.
            key = str(error.get("msg", "")).split(": ")[-1]
        if key and key not in keys:
            keys.append(key)
    return keys


def load_settings(**overrides) -> GatewaySettings:
    """Build settings from the environment, failing fast with the offending keys."""
    try:
        return GatewaySettings(**overrides)
    except ValidationError as exc:
        keys = ", ".join(_offending_keys(exc))
        raise ConfigurationError(f"Missing or invalid environment variables: {keys}") from exc
