"""Configuration of the relay process, read from the environment and an optional .env file."""

import logging
from pathlib import Path

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .relay import BacklogPolicy

PLACEHOLDER_TOKENS = frozenset({"xxx", "changeme", "your-bot-token"})


class Settings(BaseSettings):
    """Settings of the relay process. Only TELEGRAM_BOT_TOKEN is required."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    telegram_bot_token: str = Field(..., alias="TELEGRAM_BOT_TOKEN")
    telegram_api_base: str = Field("https://api.telegram.org", alias="TELEGRAM_API_BASE")
    port: int = Field(3001, alias="PORT", ge=1, le=65535)
    sink_url: str | None = Field(None, alias="RELAY_SINK_URL")
    poll_wait: int = Field(30, alias="RELAY_POLL_WAIT", ge=0)
    poll_timeout: float = Field(35.0, alias="RELAY_POLL_TIMEOUT", gt=0)
    backoff: float = Field(5.0, alias="RELAY_BACKOFF", ge=0)
    request_timeout: float = Field(10.0, alias="RELAY_REQUEST_TIMEOUT", gt=0)
    backlog_policy: BacklogPolicy = Field(BacklogPolicy.DISCARD, alias="RELAY_BACKLOG_POLICY")
    cursor_file: Path | None = Field(None, alias="RELAY_CURSOR_FILE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("telegram_bot_token")
    @classmethod
    def _check_token(cls, value: str) -> str:
        value = value.strip()
        if not value or value.lower() in PLACEHOLDER_TOKENS:
            raise ValueError("TELEGRAM_BOT_TOKEN is missing or still a placeholder")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @model_validator(mode="after")
    def _check_timeouts(self) -> "Settings":
        if self.poll_timeout <= self.poll_wait:
            raise ValueError("RELAY_POLL_TIMEOUT must be greater than RELAY_POLL_WAIT")
        return self

    @property
    def webhook_url(self) -> str:
        """The sink endpoint, defaulting to the local server's Telegram webhook route."""
        return self.sink_url or f"http://127.0.0.1:{self.port}/api/webhooks/telegram"


def load_settings(**overrides) -> Settings:
    """Load the settings, turning validation failures into a fatal ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as err:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc']) or 'settings'}: {error['msg']}"
            for error in err.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from err
