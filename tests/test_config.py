from pathlib import Path

import pytest
from pollrelay import BacklogPolicy, ConfigurationError, load_settings

TOKEN = "123456:test-token"

ENV_VARS = (
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_API_BASE",
    "PORT",
    "RELAY_SINK_URL",
    "RELAY_POLL_WAIT",
    "RELAY_POLL_TIMEOUT",
    "RELAY_BACKOFF",
    "RELAY_REQUEST_TIMEOUT",
    "RELAY_BACKLOG_POLICY",
    "RELAY_CURSOR_FILE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch) -> None:
    # arrange
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TOKEN)

    # act
    settings = load_settings(_env_file=None)

    # assert
    assert settings.telegram_bot_token == TOKEN
    assert settings.telegram_api_base == "https://api.telegram.org"
    assert settings.webhook_url == "http://127.0.0.1:3001/api/webhooks/telegram"
    assert settings.poll_wait == 30
    assert settings.poll_timeout == 35.0
    assert settings.backoff == 5.0
    assert settings.backlog_policy is BacklogPolicy.DISCARD
    assert settings.cursor_file is None
    assert settings.log_level == "INFO"


def test_port_override_changes_default_sink(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TOKEN)
    monkeypatch.setenv("PORT", "4000")

    settings = load_settings(_env_file=None)

    assert settings.webhook_url == "http://127.0.0.1:4000/api/webhooks/telegram"


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    # arrange
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", f"  {TOKEN}  ")
    monkeypatch.setenv("RELAY_SINK_URL", "http://app:8080/hooks/telegram")
    monkeypatch.setenv("RELAY_POLL_WAIT", "50")
    monkeypatch.setenv("RELAY_POLL_TIMEOUT", "60")
    monkeypatch.setenv("RELAY_BACKLOG_POLICY", "replay")
    monkeypatch.setenv("RELAY_CURSOR_FILE", str(tmp_path / "offset"))
    monkeypatch.setenv("LOG_LEVEL", "debug")

    # act
    settings = load_settings(_env_file=None)

    # assert
    assert settings.telegram_bot_token == TOKEN
    assert settings.webhook_url == "http://app:8080/hooks/telegram"
    assert settings.poll_wait == 50
    assert settings.poll_timeout == 60.0
    assert settings.backlog_policy is BacklogPolicy.REPLAY
    assert settings.cursor_file == Path(tmp_path / "offset")
    assert settings.log_level == "DEBUG"


def test_missing_token_is_fatal() -> None:
    with pytest.raises(ConfigurationError, match="TELEGRAM_BOT_TOKEN") as excinfo:
        load_settings(_env_file=None)

    assert excinfo.value.fatal


@pytest.mark.parametrize("token", ["", "   ", "xxx", "XXX", "changeme"])
def test_placeholder_token_is_fatal(monkeypatch, token) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", token)

    with pytest.raises(ConfigurationError, match="TELEGRAM_BOT_TOKEN"):
        load_settings(_env_file=None)


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("RELAY_POLL_TIMEOUT", "30"),
        ("RELAY_POLL_TIMEOUT", "5"),
        ("PORT", "not-a-port"),
        ("RELAY_BACKLOG_POLICY", "sometimes"),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_are_fatal(monkeypatch, name, value) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TOKEN)
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(_env_file=None)

    assert TOKEN not in str(excinfo.value)
