"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")
    log_file_max_mb: int = Field(default=10, ge=1)
    log_backup_count: int = Field(default=3, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if value in (None, ""):
            return "INFO"
        return str(value).strip().upper()


# Global settings instance
settings = Settings()
