"""Configuration management with Pydantic and XDG base directory support."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """pkisig configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PKISIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_algorithm: str = Field(
        default="sha256",
        description="Digest algorithm assumed when a caller does not name one",
    )

    signature_encoding: Literal["raw", "base64"] = Field(
        default="raw",
        description="Encoding of signature files read by the CLI",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/pkisig)",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Root logging level for CLI runs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        data_dir = self.data_dir if self.data_dir else get_xdg_data_home() / "pkisig"
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_report_path(self) -> Path:
        """Get default path for batch verification reports."""
        return self.get_data_dir() / "verification-report.jsonl"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings | None) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
