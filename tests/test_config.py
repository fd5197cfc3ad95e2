from pathlib import Path

import pytest

from loomgate.config import DEFAULT_GATEWAY_PORT, load_settings
from loomgate.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "BIND_MAX_RETRIES", "BIND_BASE_DELAY_MS", "LOG_LEVEL"):
        monkeypatch.delenv(f"LOOMGATE_{name}", raising=False)


def test_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)

    assert settings.host == "127.0.0.1"
    assert settings.port == DEFAULT_GATEWAY_PORT
    assert settings.bind_max_retries == 5
    assert settings.bind_base_delay == 0.5


def test_env_file_in_workspace(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("LOOMGATE_PORT=9000\nLOOMGATE_BIND_BASE_DELAY_MS=10\nOTHER=1\n", encoding="utf-8")

    settings = load_settings(tmp_path)

    assert settings.port == 9000
    assert settings.bind_base_delay == 0.01


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOOMGATE_HOST", "0.0.0.0")
    monkeypatch.setenv("LOOMGATE_BIND_MAX_RETRIES", "0")

    settings = load_settings(tmp_path)

    assert settings.host == "0.0.0.0"
    assert settings.bind_max_retries == 0


@pytest.mark.parametrize(("name", "value"), [("PORT", "0"), ("PORT", "70000"), ("BIND_MAX_RETRIES", "-1")])
def test_invalid_values_raise_configuration_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, name: str, value: str
) -> None:
    monkeypatch.setenv(f"LOOMGATE_{name}", value)

    with pytest.raises(ConfigurationError):
        load_settings(tmp_path)
