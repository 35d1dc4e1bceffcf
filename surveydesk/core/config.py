"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_prefix: str = "/v1"

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "surveydesk"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # JWT Settings
    jwt_secret_key: str = "your-super-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30
    jwt_refresh_token_expire_days: int = 30  # "remember me" sessions
    jwt_session_refresh_expire_hours: int = 12  # browser-session sessions

    # Sensitive operations (password change) need a fresh sign-in
    recent_login_max_age_minutes: int = 5
    min_password_length: int = 6

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Stores
    stores: Annotated[list[str], NoDecode] = ["fontanar", "andino", "unicentro", "calle90"]
    default_store: str = "general"
    manager_email_marker: str = "gerencia"

    # Month bucketing uses the stores' local calendar
    local_timezone: str = "America/Bogota"

    @field_validator("cors_origins", "stores", mode="before")
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(",")]
        return v

    @field_validator("stores")
    @classmethod
    def lowercase_stores(cls, v: list[str]) -> list[str]:
        return [store.lower() for store in v]

    @property
    def accepted_stores(self) -> list[str]:
        """Stores a public survey may be tagged with."""
        return [*self.stores, self.default_store]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
