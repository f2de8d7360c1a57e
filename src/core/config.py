"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from the environment (and ``.env`` when present)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Profile Pages API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Shareable links are built as {public_base_url}/{path}
    public_base_url: str = Field(default="http://localhost:5173")

    # Remote store
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/profile_pages",
        description="Remote store URL; plain postgresql:// is upgraded to asyncpg",
    )

    # Local store
    local_store_backend: Literal["file", "memory"] = Field(default="file")
    local_store_path: str = Field(
        default=".local_store.json",
        description="JSON file used by the 'file' backend",
    )
    local_store_max_bytes: int | None = Field(
        default=None,
        description="Byte quota for the 'memory' backend; unlimited when unset",
    )

    # Page resolution
    resolve_retry_delay_seconds: float = Field(default=2.0, ge=0)
    resolve_max_retries: int = Field(default=1, ge=0)
    page_path_length: int = Field(default=10, ge=4, le=64)

    # Auth: Supabase ES256 tokens via JWKS, HS256 for local tokens
    supabase_url: str = Field(default="", description="e.g. https://xyzabc.supabase.co")
    jwt_secret_key: str = Field(default="CHANGE-ME-IN-PRODUCTION")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    rate_limit_enabled: bool = Field(default=True)
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """The database URL with the asyncpg driver scheme.

        Hosting providers hand out ``postgresql://`` URLs; the async engine
        needs ``postgresql+asyncpg://``.
        """
        if self.database_url.startswith("postgresql://"):
            return "postgresql+asyncpg://" + self.database_url[len("postgresql://") :]
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
