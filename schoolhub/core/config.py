"""Application configuration settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "SchoolHub Academic Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite:///./schoolhub.db"
    AUTO_CREATE_TABLES: bool = True

    # Reporting
    REPORT_RANKING: Literal["sequential", "shared"] = "sequential"
    DEFAULT_ATTENDANCE_WINDOW_DAYS: int = 30
    RECENT_ABSENCE_DAYS: int = 7

    @field_validator("REPORT_RANKING", mode="before")
    @classmethod
    def normalize_ranking(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
