# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from typing import Any

import pytest

from observability import logger
from observability.metrics import timed


def test_log_event_emits_valid_jsonl(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """
    - log_event emits exactly one JSONL line
    - payload is serialized as-is
    - output sink is patchable
    """
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    monkeypatch.setattr(logger, "_json_lines", True)

    payload: dict[str, Any] = {
        "event_type": "TEST",
        "value": 123,
    }

    logger.log_event(payload)

    assert len(captured) == 1
    assert json.loads(captured[0]) == payload


def test_unserializable_event_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    monkeypatch.setattr(logger, "_json_lines", True)

    logger.log_event({"ts_ms": 1, "event_type": "BAD", "obj": object()})

    decoded = json.loads(captured[0])
    assert decoded["event_type"] == "LOGGER_SERIALIZATION_ERROR"
    assert decoded["ts_ms"] == 1


def test_text_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    monkeypatch.setattr(logger, "_json_lines", True)
    logger.configure(json_lines=False)

    logger.log_event({"ts_ms": 5, "event_type": "NAVIGATED", "target": "t3", "session_id": None})

    assert captured == ["NAVIGATED target='t3'"]


def test_timed_emits_one_metric_even_on_error(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    monkeypatch.setattr(logger, "_json_lines", True)

    with pytest.raises(ValueError):
        with timed("wifi_wait", session_id="sess_x"):
            raise ValueError("boom")

    assert len(captured) == 1
    metric = json.loads(captured[0])
    assert metric["event_type"] == "METRIC_TIMER"
    assert metric["metric"] == "wifi_wait"
    assert metric["session_id"] == "sess_x"
