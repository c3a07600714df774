from __future__ import annotations

import logging

import pytest

import regenurl


class _RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_package_logger_has_a_null_handler() -> None:
    package_logger = logging.getLogger(regenurl.__name__)

    assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)


def test_log_calls_are_silent_without_a_configured_handler(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    fallback = _RecordingHandler()
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging, "lastResort", fallback)

    logging.getLogger("regenurl.domain.regeneration").error("Invalidate cache error : %s", "x")

    assert fallback.records == []
