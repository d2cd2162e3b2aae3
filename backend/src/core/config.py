"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database - SQLite by default, any async SQLAlchemy URL works
    database_url: str = Field(
        default="sqlite+aiosqlite:///./remember.db",
        validation_alias="DATABASE_URL",
    )

    # OpenAI - both key and flag must be set for tag inference to run
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_enabled: bool = Field(default=False, validation_alias="OPENAI_ENABLED")
    openai_model: str = Field(
        default="gpt-3.5-turbo-0125",
        validation_alias="OPENAI_MODEL",
    )

    # Redis - backs the job queue
    redis_url: str = Field(default="redis://localhost:6379", validation_alias="REDIS_URL")
    queue_name: str = Field(default="openai_queue", validation_alias="QUEUE_NAME")

    # Worker
    worker_max_attempts: int = Field(default=3, ge=1, validation_alias="WORKER_MAX_ATTEMPTS")
    worker_poll_timeout: int = Field(default=5, ge=1, validation_alias="WORKER_POLL_TIMEOUT")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("openai_enabled", mode="before")
    @classmethod
    def parse_empty_flag(cls, v: object) -> object:
        """Treat an empty OPENAI_ENABLED value as disabled."""
        if isinstance(v, str) and not v.strip():
            return False
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level so it can be passed straight to logging."""
        return v.strip().upper()

    @property
    def openai_configured(self) -> bool:
        """Whether both the API key and the enabled flag are set."""
        return bool(self.openai_api_key) and self.openai_enabled


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
