from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Fire Department Tracker"
    VERSION: str = "2.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    DATABASE_PATH: str = "./data/fire_tracker.db"

    # API settings
    API_PREFIX: str = "/api"

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000"
    ]

    # Security settings
    MAX_FAILED_ATTEMPTS: int = 5
    PIN_MIN_LENGTH: int = 4
    PIN_MAX_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12
    # Same 401 message for unknown badge and wrong PIN
    GENERIC_AUTH_ERRORS: bool = False

    # Rate limiting (slowapi limit strings)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/15 minutes"
    AUTH_RATE_LIMIT: str = "5/15 minutes"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = True

    # Retention (days)
    AUTH_LOG_RETENTION_DAYS: int = 90
    AUDIT_LOG_RETENTION_DAYS: int = 365

    # Department
    DEPARTMENT_NAME: Optional[str] = "Fire Department"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once from the environment."""
    return Settings()
