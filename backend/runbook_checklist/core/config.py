"""
Application configuration settings
"""
import json
from typing import Annotated, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import os


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application
    APP_NAME: str = "Runbook Checklist"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = "sqlite:///./runbook.db"

    # CORS
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://localhost:5000"]

    # File Upload
    MAX_FILE_SIZE: int = 20 * 1024 * 1024  # 20MB
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    # Client
    API_BASE_URL: str = "http://localhost:5000"
    CLIENT_TIMEOUT_SECONDS: float = 30.0
    STEP_FLUSH_DELAY_SECONDS: float = 0.3

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def _parse_allowed_hosts(cls, value: Union[str, List[str], None]) -> List[str]:
        if value in (None, ""):
            return []
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                return [str(item) for item in json.loads(stripped)]
            return [part.strip() for part in stripped.split(",") if part.strip()]
        return value


# Create settings instance
settings = Settings()

# Ensure upload directory exists
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
