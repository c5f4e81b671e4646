"""
Core dispatch primitives.

This module provides:
- Event: Base class for raisable events
- EventHandler / HandlerRegistry: Handler capability and static resolution
- StreamProcessorRegistry: Stream-scoped processors with persistent state
- DispatchEngine: Persist, handle, process
- EventTypeRegistry: Explicit type name -> constructor mapping
- Clock: Swappable UTC time source
"""

from .events import Event, event_type_name
from .context import DispatchContext, EngineMode
from .handlers import EventHandler, HandlerRegistry, handles_exactly
from .processors import StreamProcessorRegistry, StreamState
from .registry import EventTypeRegistry
from .clock import PausedClock, SystemClock
from .errors import (
    DuplicateEventTypeError,
    DuplicateHandlerError,
    EasyEventsError,
    EventStoreError,
    HandlerContractMismatch,
    IntegrityError,
    InvalidEventError,
    RecursionDepthExceeded,
    UnknownEventTypeError,
)
from .engine import DispatchEngine

__all__ = [
    "Event",
    "event_type_name",
    "DispatchContext",
    "EngineMode",
    "EventHandler",
    "HandlerRegistry",
    "handles_exactly",
    "StreamProcessorRegistry",
    "StreamState",
    "EventTypeRegistry",
    "PausedClock",
    "SystemClock",
    "DispatchEngine",
    "DuplicateEventTypeError",
    "DuplicateHandlerError",
    "EasyEventsError",
    "EventStoreError",
    "HandlerContractMismatch",
    "IntegrityError",
    "InvalidEventError",
    "RecursionDepthExceeded",
    "UnknownEventTypeError",
]
