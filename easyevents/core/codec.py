"""
Canonical serialization of events for durable stores.

All record hashing goes through canonical_json_bytes() so the same record
produces the same bytes on every platform.

Decoding reverses what JSON flattens, guided by the event class annotations:
ISO strings become datetimes, dicts become nested dataclasses and lists
become tuples where a field says so. Unannotated values come back as plain
JSON types.
"""

import dataclasses
import json
import types
import typing
from datetime import datetime
from typing import Any, Dict, Union

from .events import is_datetime_hint, require_stream
from .registry import EventTypeRegistry


def canonicalize(obj: Any) -> Any:
    """
    Convert nested values to canonical JSON-compatible form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - datetimes converted to ISO-8601 strings
    - dataclass instances converted to dicts
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, datetime):
        return obj.isoformat()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return canonicalize(dataclasses.asdict(obj))
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Returns:
        UTF-8 encoded JSON bytes
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    return canonical_json_bytes(obj).decode("utf-8")


def event_payload(event: Any) -> Dict[str, Any]:
    """Dataclass fields, or public instance attributes, of an event."""
    if dataclasses.is_dataclass(event):
        return {f.name: getattr(event, f.name) for f in dataclasses.fields(event)}
    return {k: v for k, v in vars(event).items() if not k.startswith("_")}


def encode_event(event: Any, position: int, registry: EventTypeRegistry) -> Dict[str, Any]:
    """
    Build the storable record of an event.

    Returns:
        Canonical dict: {"position", "type", "stream", "payload"}
    """
    return canonicalize(
        {
            "position": position,
            "type": registry.name_for(event),
            "stream": require_stream(event),
            "payload": event_payload(event),
        }
    )


def _revive(hint: Any, value: Any) -> Any:
    """Rebuild a JSON value into the type named by a field annotation."""
    if value is None or hint is None:
        return value
    if is_datetime_hint(hint):
        return datetime.fromisoformat(value) if isinstance(value, str) else value

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (Union, types.UnionType):
        members = [a for a in args if a is not type(None)]
        return _revive(members[0], value) if len(members) == 1 else value

    if isinstance(value, dict):
        if isinstance(hint, type) and dataclasses.is_dataclass(hint):
            return _build_dataclass(hint, _revive_fields(hint, value))
        if origin is dict and len(args) == 2:
            return {k: _revive(args[1], v) for k, v in value.items()}
        return value

    if isinstance(value, list):
        if hint is tuple or origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(_revive(args[0], v) for v in value)
            if len(args) == len(value):
                return tuple(_revive(a, v) for a, v in zip(args, value))
            return tuple(value)
        if origin is list and args:
            return [_revive(args[0], v) for v in value]
    return value


def _revive_fields(cls: type, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        return dict(payload)
    return {key: _revive(hints.get(key), value) for key, value in payload.items()}


def _build_dataclass(cls: type, payload: Dict[str, Any]) -> Any:
    init_names = {f.name for f in dataclasses.fields(cls) if f.init}
    obj = cls(**{k: v for k, v in payload.items() if k in init_names})
    for key, value in payload.items():
        if key not in init_names:
            object.__setattr__(obj, key, value)
    return obj


def decode_event(record: Dict[str, Any], registry: EventTypeRegistry) -> Any:
    """
    Rebuild an event from its stored record.

    Raises:
        UnknownEventTypeError: If the record's type is not registered
    """
    factory = registry.resolve(record["type"])
    payload = record.get("payload", {})

    if not isinstance(factory, type):
        return factory(**payload)

    payload = _revive_fields(factory, payload)
    if dataclasses.is_dataclass(factory):
        return _build_dataclass(factory, payload)

    event = factory.__new__(factory)
    event.__dict__.update(payload)
    return event
