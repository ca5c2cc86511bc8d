"""
Service settings.

Everything tunable about the pipeline lives here: the store connection,
upstream credentials, limiter capacities and windows, cache lifetimes and
profile lookup.

Following Sandi Metz principles:
- Single Responsibility: Configuration loading and validation
- Small class: Settings grouped by concern
"""

from typing import List, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"


class AppConfig(BaseSettings):
    """
    Settings read from the environment, then from `.env`.

    Field names map to upper-case variables (`REDIS_HOST`, `X_BEARER_TOKEN`).
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="xiq", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="CORS allowed origins",
    )

    # Redis settings (empty host means no shared store is configured)
    redis_host: str = Field(default="", description="Redis host")
    redis_port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    redis_db: int = Field(default=0, ge=0, le=15, description="Redis database")
    redis_password: str = Field(default="", description="Redis password")
    redis_max_connections: int = Field(default=10, ge=1, description="Max connections")
    use_memory_store: bool = Field(
        default=False, description="Use a process-local store when Redis is absent"
    )

    # X API settings
    x_bearer_token: str = Field(default="", description="X API bearer token")
    x_api_base_url: str = Field(
        default="https://api.x.com/2", description="X API v2 base URL"
    )
    x_timeout_seconds: float = Field(default=10.0, gt=0, description="X API timeout")

    # LLM settings
    openai_api_key: str = Field(default="", description="OpenAI API key")
    score_model: str = Field(default="gpt-5-mini", description="Score model")

    # Rate limit settings
    ip_rate_limit: int = Field(default=60, ge=1, description="Requests per IP")
    ip_rate_window_seconds: int = Field(default=600, ge=1, description="IP window")
    user_rate_limit: int = Field(default=10, ge=1, description="Requests per handle")
    user_rate_window_seconds: int = Field(default=600, ge=1, description="Handle window")
    global_rate_limit: int = Field(default=50, ge=1, description="Requests overall")
    global_rate_window_seconds: int = Field(
        default=900, ge=1, description="Global window"
    )
    rate_limit_fail_closed: str = Field(
        default="", description="Limiters that deny when the store errors"
    )

    # Upstream cooldown settings
    cooldown_fallback_seconds: int = Field(
        default=60, ge=1, description="Cooldown when upstream gives no reset"
    )

    # Cache settings
    profile_cache_ttl_seconds: int = Field(default=3600, ge=1, description="Profile TTL")
    posts_cache_ttl_seconds: int = Field(default=3600, ge=1, description="Posts TTL")
    score_cache_ttl_seconds: int = Field(default=21600, ge=1, description="Score TTL")

    # Operation settings
    profile_lookup_strategy: Literal["search", "direct"] = Field(
        default="search", description="How profiles are resolved upstream"
    )
    posts_default_max_results: int = Field(default=25, ge=1, description="Default posts")
    posts_min_results: int = Field(default=5, ge=1, description="Minimum posts")
    posts_max_results: int = Field(default=100, ge=1, description="Maximum posts")

    @field_validator("rate_limit_fail_closed")
    @classmethod
    def validate_fail_closed(cls, v: str) -> str:
        """Validate fail-closed limiter names."""
        names = [name.strip() for name in v.split(",") if name.strip()]
        unknown = [name for name in names if name not in ("ip", "user", "global")]
        if unknown:
            raise ValueError(f"Unknown limiter names: {', '.join(unknown)}")
        return ",".join(names)

    @model_validator(mode="after")
    def validate_store_backend(self) -> "AppConfig":
        """Reject the process-local store in production."""
        if self.is_production and self.use_memory_store:
            raise ValueError(
                "USE_MEMORY_STORE is not allowed in production; "
                "limits would be enforced per worker"
            )
        return self

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def fail_closed_limiters(self) -> List[str]:
        """Get limiter names that fail closed on store errors."""
        return [name for name in self.rate_limit_fail_closed.split(",") if name]

    @property
    def has_redis(self) -> bool:
        """Check if a Redis store is configured."""
        return bool(self.redis_host)

    @property
    def redis_url(self) -> str:
        """Build Redis URL."""
        if self.redis_password:
            return (
                f"redis://:{self.redis_password}@"
                f"{self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


# Global configuration instance
config = AppConfig()
