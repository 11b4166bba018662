"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "timetrack-compliance"
    log_level: str = "INFO"

    # Upper bound on entries accepted per request
    max_entries_per_request: int = 366


settings = Settings()
