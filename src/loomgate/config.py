"""Configuration management for loomgate."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from loomgate.errors import ConfigurationError

DEFAULT_GATEWAY_PORT = 18789


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LOOMGATE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gateway
    host: str = Field(default="127.0.0.1", description="Interface the gateway binds to")
    port: int = Field(default=DEFAULT_GATEWAY_PORT, ge=1, le=65535, description="Gateway port")

    # Retry budget for EADDRINUSE while a previous instance releases its socket
    bind_max_retries: int = Field(default=5, ge=0, description="Retries after the first bind attempt")
    bind_base_delay_ms: int = Field(default=500, ge=0, description="First backoff delay, doubled per retry")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @property
    def bind_base_delay(self) -> float:
        return self.bind_base_delay_ms / 1000


def load_settings(workspace: Path | None = None) -> Settings:
    """Load settings from the environment and the workspace ``.env`` file.

    Args:
        workspace: Directory holding the ``.env`` file. Defaults to the current directory.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    env_file = (workspace or Path.cwd()) / ".env"
    try:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationError(f"invalid loomgate settings: {exc}") from exc
