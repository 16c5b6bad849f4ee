"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from KNOWLEDGE_HUB_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="KNOWLEDGE_HUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "Knowledge Hub"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    database_url: str = "sqlite:///./knowledge_hub.db"

    # Sessions
    session_cookie_name: str = "session_id"
    session_ttl_seconds: int = 7 * 24 * 60 * 60
    session_cookie_secure: bool = False

    recent_articles_limit: int = 5

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
