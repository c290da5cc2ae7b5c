"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Deployer Hunter configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="Deployer Hunter", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Upstreams
    backend_base_url: str | None = Field(
        default=None, description="First-party backend proxy base URL"
    )
    helius_api_key: SecretStr = Field(default=SecretStr(""), description="Helius API key")
    solana_rpc_url: str = Field(
        default="https://mainnet.helius-rpc.com",
        description="Solana RPC endpoint URL (api-key appended when set)",
    )
    upstream_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for upstream HTTP calls"
    )
    circuit_breaker_threshold: int = Field(
        default=5, ge=1, description="Failures before circuit opens"
    )
    circuit_breaker_cooldown: int = Field(
        default=30, ge=1, description="Seconds before half-open"
    )

    # Source selection for the default view
    token_source: Literal["mock", "pumpfun", "dexscreener", "rpc", "backend"] = Field(
        default="dexscreener", description="Active source fetcher for the default view"
    )
    dexscreener_search_query: str = Field(
        default="solana", description="Free-text query for DEX pair search"
    )
    dexscreener_recent_hours: int = Field(
        default=24, ge=1, description="Only keep pairs created within this window"
    )
    dexscreener_max_pairs: int = Field(default=100, ge=1, description="Pairs kept per search")
    pumpfun_fetch_limit: int = Field(default=50, ge=1, le=200, description="Coins per fetch")

    # Cache TTLs (seconds)
    default_cache_ttl_seconds: int = Field(default=300, ge=1)
    trending_cache_ttl_seconds: int = Field(default=60, ge=1)
    volume_cache_ttl_seconds: int = Field(default=30, ge=1)

    # Ranking sizes
    default_top_n: int = Field(default=5, ge=1)
    trending_top_n: int = Field(default=10, ge=1)
    volume_top_n: int = Field(default=10, ge=1)

    # Dashboard
    dashboard_refresh_seconds: int = Field(
        default=30, ge=5, description="Dashboard auto-refresh interval"
    )

    # Filter thresholds (default view)
    min_holders: int = Field(default=15, ge=0)
    min_market_cap: float = Field(default=6000.0, ge=0)
    min_bonding_rate: float = Field(default=50.0, ge=0, le=100)
    max_token_age_minutes: int | None = Field(default=24 * 60, ge=1)
    on_empty_filter: Literal["empty", "fallback_top_n"] = Field(
        default="empty", description="Behaviour when no token passes the filters"
    )

    # Enrichment
    reputation_mode: Literal["synthetic", "live"] = Field(
        default="synthetic", description="Deployer reputation model"
    )
    market_enrichment_enabled: bool = Field(
        default=False, description="Look up holders and market cap per token"
    )
    enrichment_limit: int = Field(default=20, ge=1, description="Max tokens enriched per run")
    enrichment_delay_ms: int = Field(default=150, ge=0, description="Delay between lookups")

    # Trending score weights
    trending_price_change_weight: float = Field(default=3.0)
    trending_txns_divisor: float = Field(default=5.0, gt=0)
    trending_volume_weight: float = Field(default=1.5)
    trending_buy_pressure_bonus: float = Field(default=10.0)

    @field_validator("backend_base_url")
    @classmethod
    def validate_backend_base_url(cls, v: str | None) -> str | None:
        """Validate backend URL format, treating blank as unset."""
        if v is None or not v.strip():
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("Backend URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("solana_rpc_url")
    @classmethod
    def validate_solana_rpc_url(cls, v: str) -> str:
        """Validate RPC URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Solana RPC URL must start with http:// or https://")
        return v

    @property
    def has_helius_key(self) -> bool:
        """Whether an upstream RPC API key is configured."""
        return bool(self.helius_api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
