"""Configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SHEETTABLE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHEETTABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google APIs
    sheets_api_base: str = "https://sheets.googleapis.com/v4/spreadsheets"
    drive_api_base: str = "https://www.googleapis.com/drive/v3/files"
    timeout: int = 60  # seconds

    # Credentials used by the CLI when no flag is given
    api_key: str = ""
    service_account_path: str = ""

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
