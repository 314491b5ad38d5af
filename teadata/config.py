from typing import Final, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_DATABASE_FILE, DEFAULT_HTTP_TIMEOUT

BackendKind = Literal["sqlite", "rest", "rest-envelope"]


class Settings(BaseSettings):
    """Library settings loaded from environment variables and .env files."""

    # Backend selection
    backend: BackendKind = Field(
        default="sqlite",
        description="Data service backend: sqlite, rest or rest-envelope",
    )

    # Embedded store configuration
    database_file: str = Field(
        default=DEFAULT_DATABASE_FILE, description="Path of the SQLite database file"
    )

    # Tea API configuration
    tea_api_url: str | None = Field(
        default=None, description="Base URL of the tea REST API (e.g. http://host/)"
    )
    http_timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT, gt=0, description="HTTP timeout in seconds"
    )

    # Logging configuration
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str | None = Field(
        default=None, description="Override the log level (DEBUG, INFO, ...)"
    )
    log_to_file: bool = Field(
        default=False, description="Also write logs to logs/teadata.log"
    )

    @field_validator("tea_api_url")
    @classmethod
    def validate_tea_api_url(cls, v: str | None) -> str | None:
        """Treat a blank URL as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    # Pydantic Settings configuration
    model_config = SettingsConfigDict(
        env_prefix="TEADATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def locator(self) -> str:
        """Get the locator the configured backend is initialized with."""
        if self.backend == "sqlite":
            return self.database_file
        return self.tea_api_url or ""


# Global settings instance
settings: Final = Settings()
