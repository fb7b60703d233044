"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when the service cannot start with the given configuration."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # so SPREADSHEET_ID works regardless of case
        extra="ignore",
    )

    # Google Sheets target
    spreadsheet_id: str = ""
    sheet_range: str = "Sheet1!A:L"

    # Service-account credentials: inline JSON (preferred on hosted envs) or key file
    gcp_service_account_json: str | None = None
    gcp_service_account_file: str | None = None

    # Lead handling
    default_brokerage: str = "Ariel Property Advisors"
    raw_max_chars: int = 1000
    normalize_roles: bool = True

    # De-duplication: bounded in-memory set unless a database is configured
    dedupe_max_keys: int = 10000
    database_url: str | None = None  # e.g. postgresql+asyncpg://user:pw@host/db

    # App
    max_payload_bytes: int = 2 * 1024 * 1024
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def validate_settings(settings: Settings) -> Settings:
    """
    Startup validation. Raises ConfigError instead of exiting so the
    entry point decides how to surface it.
    """
    if not settings.spreadsheet_id.strip():
        raise ConfigError("Missing SPREADSHEET_ID")
    if not (settings.gcp_service_account_json or settings.gcp_service_account_file):
        raise ConfigError(
            "Set GCP_SERVICE_ACCOUNT_JSON (inline) or GCP_SERVICE_ACCOUNT_FILE (path)."
        )
    return settings


settings = Settings()
