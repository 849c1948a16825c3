"""Application configuration settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Porras FC API"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "API para ligas privadas de pronósticos de fútbol"
    API_V1_PREFIX: str = "/api/v1"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Local store (DATA_BACKEND=sql)
    DATABASE_URL: str = "sqlite:///./porras.db"

    # Data backend: "sql" keeps everything local, "rest" talks to the hosted service
    DATA_BACKEND: Literal["sql", "rest"] = "sql"
    DATA_SERVICE_URL: str = "http://localhost:54321"
    DATA_SERVICE_KEY: str = ""
    DATA_SERVICE_TIMEOUT_SECONDS: float = 10.0
    DATA_SERVICE_RPC_ENABLED: bool = True

    # Invite codes
    INVITE_CODE_LENGTH: int = 6
    INVITE_CODE_CHECK_UNIQUE: bool = True
    INVITE_CODE_MAX_ATTEMPTS: int = 5

    # Navigation targets handed back to the client
    AUTH_ENTRY_PATH: str = "/auth"
    HOME_PATH: str = "/"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get ALLOWED_ORIGINS as a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
