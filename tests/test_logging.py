"""Event log helper tests."""

from __future__ import annotations

import json

import pytest

from locus.logging import log_event, log_jsonl


def test_log_jsonl_appends_sorted_records(tmp_path) -> None:
    path = tmp_path / "nested" / "events.jsonl"

    log_jsonl(str(path), {"b": 1, "a": 2})
    log_jsonl(str(path), {"event": "second"})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == '{"a": 2, "b": 1}'
    assert json.loads(lines[1]) == {"event": "second"}


def test_log_event_writes_timestamp(tmp_path) -> None:
    path = tmp_path / "registry.jsonl"

    record = log_event("add", path=str(path), alias="default", paths=["/srv"])

    logged = json.loads(path.read_text(encoding="utf-8"))
    assert logged == record
    assert logged["event"] == "add"
    assert logged["paths"] == ["/srv"]
    assert "timestamp" in logged


def test_log_event_without_path_is_silent(tmp_path) -> None:
    assert log_event("add", path=None, alias="default") is None
    assert list(tmp_path.iterdir()) == []


def test_log_event_requires_name(tmp_path) -> None:
    with pytest.raises(ValueError):
        log_event("", path=str(tmp_path / "x.jsonl"))
