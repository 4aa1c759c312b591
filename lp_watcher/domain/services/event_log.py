from __future__ import annotations

from dataclasses import asdict
import json

from lp_watcher.domain.entities.events import RawEvent


# Integers above this lose precision in JavaScript-based JSON consumers.
_MAX_SAFE_INTEGER = 2**53 - 1


def _json_safe(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and abs(value) > _MAX_SAFE_INTEGER:
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def serialize_event(event: RawEvent) -> str:
    payload = {key: _json_safe(value) for key, value in asdict(event).items()}
    payload["event"] = event.log_name
    payload["kind"] = event.kind
    payload["timestamp"] = event.timestamp.isoformat()
    return json.dumps(payload, sort_keys=True)
