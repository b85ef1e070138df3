import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from atomic_swap.config import (
    ENV_AUDIT_CUSTODY,
    ENV_EVENT_LOG,
    ENV_LOG_LEVEL,
    LedgerConfig,
    configure_logging,
    make_event_sink,
)
from atomic_swap.events import JsonlEventSink, LoggingEventSink


def test_defaults_from_empty_environment() -> None:
    config = LedgerConfig.from_env({})
    assert config == LedgerConfig()
    assert config.event_log_path is None
    assert config.log_level == "WARNING"
    assert not config.audit_custody


def test_from_env_reads_all_settings(tmp_path: Path) -> None:
    log_path = tmp_path / "events.jsonl"
    config = LedgerConfig.from_env(
        {
            ENV_EVENT_LOG: str(log_path),
            ENV_LOG_LEVEL: "debug",
            ENV_AUDIT_CUSTODY: "Yes",
        }
    )
    assert config.event_log_path == log_path
    assert config.log_level == "DEBUG"
    assert config.audit_custody


@pytest.mark.parametrize("value", ["0", "false", "", "nope"])
def test_audit_flag_falsy_values(value: str) -> None:
    assert not LedgerConfig.from_env({ENV_AUDIT_CUSTODY: value}).audit_custody


def test_unknown_log_level_raises() -> None:
    with pytest.raises(ValueError):
        LedgerConfig.from_env({ENV_LOG_LEVEL: "chatty"})


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_AUDIT_CUSTODY, "1")
    monkeypatch.delenv(ENV_EVENT_LOG, raising=False)
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)
    assert LedgerConfig.from_env().audit_custody


def test_make_event_sink_selection(tmp_path: Path) -> None:
    assert isinstance(make_event_sink(LedgerConfig()), LoggingEventSink)
    sink = make_event_sink(LedgerConfig(event_log_path=tmp_path / "e.jsonl"))
    assert isinstance(sink, JsonlEventSink)
    assert sink.path == tmp_path / "e.jsonl"


def test_configure_logging_passes_level(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: Dict[str, Any] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    configure_logging(LedgerConfig(log_level="DEBUG"))
    assert captured["level"] == "DEBUG"
    assert "%(name)s" in captured["format"]
