import importlib
from typing import Any

import pytest

logging_utils = importlib.import_module("loomgate.logging_utils")


class _FakeLogger:
    def __init__(self) -> None:
        self.removed = 0
        self.added: list[tuple[Any, dict[str, Any]]] = []

    def remove(self) -> None:
        self.removed += 1

    def add(self, sink: Any, **kwargs: Any) -> int:
        self.added.append((sink, kwargs))
        return len(self.added)


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> _FakeLogger:
    fake = _FakeLogger()
    monkeypatch.setattr(logging_utils, "logger", fake)
    monkeypatch.setattr(logging_utils, "_active", None)
    monkeypatch.delenv("LOOMGATE_LOG_LEVEL", raising=False)
    return fake


def test_configure_logging_installs_handler_once(fake_logger: _FakeLogger) -> None:
    logging_utils.configure_logging(level="debug")
    logging_utils.configure_logging(level="DEBUG")

    assert fake_logger.removed == 1
    assert len(fake_logger.added) == 1
    assert fake_logger.added[0][1]["level"] == "DEBUG"


def test_new_level_replaces_handler(fake_logger: _FakeLogger) -> None:
    logging_utils.configure_logging()
    logging_utils.configure_logging(level="debug")

    assert fake_logger.removed == 2
    assert [options["level"] for _, options in fake_logger.added] == ["INFO", "DEBUG"]


def test_rich_style_uses_rich_handler(monkeypatch: pytest.MonkeyPatch, fake_logger: _FakeLogger) -> None:
    monkeypatch.setenv("LOOMGATE_LOG_LEVEL", "warning")

    logging_utils.configure_logging(style="rich")

    sink, options = fake_logger.added[0]
    assert type(sink).__name__ == "RichHandler"
    assert options["level"] == "WARNING"
