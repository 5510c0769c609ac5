"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8"
    )
    
    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./agrocarbon.db", alias="DATABASE_URL")
    
    # Application
    app_name: str = Field(default="Agrocarbon Verification Service", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # JSON list in the environment, e.g. CORS_ORIGINS='["http://localhost:5173"]'
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # Simulated imagery fetch latency, awaited by the API before verifying
    verification_delay_seconds: float = Field(default=0.0, ge=0, alias="VERIFICATION_DELAY_SECONDS")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
