"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from httpget.protocol.constants import DEFAULT_MAX_REDIRECTIONS


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be set through an HTTPGET_-prefixed environment
    variable or a .env file; command-line options take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTPGET_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_redirections: Annotated[int, Field(ge=-1)] = DEFAULT_MAX_REDIRECTIONS
    timeout_seconds: Annotated[float, Field(gt=0.0, le=3600.0)] | None = None
    read_size: Annotated[int, Field(ge=1, le=16 * 1024 * 1024)] = 65536
    json_logs: bool = False


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
