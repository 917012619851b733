"""JSONL event records for registry mutations."""

from __future__ import annotations

import datetime as _dt
import json
import os
from typing import Any, Dict, Optional


def log_jsonl(path: str, record: Dict[str, Any]) -> None:
    """Append *record* as one sorted-key JSON line to *path*.

    Missing parent directories are created first.
    """

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, sort_keys=True))
        handle.write("\n")


def log_event(event: str, *, path: Optional[str], **fields: Any) -> Optional[Dict[str, Any]]:
    """Write a timestamped *event* record to *path* when a path is configured."""

    if not path:
        return None
    if not isinstance(event, str) or not event:
        raise ValueError("event must be a non-empty string")
    record: Dict[str, Any] = {"event": event}
    record.update(fields)
    record.setdefault("timestamp", _dt.datetime.now(tz=_dt.timezone.utc).isoformat())
    log_jsonl(path, record)
    return record


__all__ = ["log_event", "log_jsonl"]
