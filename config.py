"""Application configuration with environment variables."""

from typing import List, Optional

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Database
    DATABASE_URL: str = "sqlite:///./trip_planner.db"

    # Credential tokens (secret is not validated until the first token is issued)
    JWT_SECRET: Optional[str] = None
    JWT_EXPIRES_DAYS: int = 1

    # CORS (comma-separated, "*" allows any origin)
    CORS_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
