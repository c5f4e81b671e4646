"""
Event model for dispatch and replay.

Events are typed records identified by their concrete class. Every event
belongs to a stream, which routes it to stream processors.
"""

import dataclasses
import inspect
import types
import typing
from datetime import datetime
from typing import Any, Optional, Union

from .errors import InvalidEventError

TIMESTAMP_FIELD = "timestamp"


class Event:
    """
    Base class for raisable events.

    Subclasses expose ``stream`` as a dataclass field, a class attribute or
    a property. Example:

        @dataclass
        class AppStarted(Event):
            stream = "AppEvents"
            version: str = ""
    """

    stream: str


def event_type_name(event: Any) -> str:
    """Simple name of an event's concrete class (or of a class)."""
    cls = event if isinstance(event, type) else type(event)
    return cls.__name__


def require_stream(event: Any) -> str:
    """
    Get the stream of an event or raise if it has none.

    Raises:
        InvalidEventError: If event.stream is missing or not a string
    """
    stream = getattr(event, "stream", None)
    if not isinstance(stream, str):
        raise InvalidEventError(
            f"{event_type_name(event)} has no string 'stream' attribute (got {stream!r})"
        )
    return stream


def is_datetime_hint(hint: Any) -> bool:
    if hint is datetime:
        return True
    if typing.get_origin(hint) in (Union, types.UnionType):
        return set(typing.get_args(hint)) == {datetime, type(None)}
    return False


def _timestamp_hint(cls: type) -> Optional[Any]:
    attr = inspect.getattr_static(cls, TIMESTAMP_FIELD, None)
    try:
        if isinstance(attr, property):
            if attr.fget is None:
                return None
            return typing.get_type_hints(attr.fget).get("return")
        return typing.get_type_hints(cls).get(TIMESTAMP_FIELD)
    except (NameError, TypeError):
        # Unresolvable forward references cannot name datetime.
        return None


def has_writable_timestamp(event: Any) -> bool:
    """
    Check whether an event declares a settable ``timestamp: datetime``.

    Read-only properties and frozen dataclasses are not writable; a
    ``timestamp`` annotated with any other type is ignored.
    """
    cls = type(event)
    if not is_datetime_hint(_timestamp_hint(cls)):
        return False

    attr = inspect.getattr_static(cls, TIMESTAMP_FIELD, None)
    if isinstance(attr, property):
        return attr.fset is not None
    if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:
        return False
    return True


def populate_timestamp(event: Any, now: datetime) -> bool:
    """
    Set event.timestamp to ``now`` if the event has a writable timestamp.

    Returns:
        True if the timestamp was set
    """
    if not has_writable_timestamp(event):
        return False
    setattr(event, TIMESTAMP_FIELD, now)
    return True
