"""
EasyEvents

In-process event dispatch and replay engine: raise typed events, persist them
to an append-only log, route them to handlers and stream processors, and
replay the log to rebuild side effects.
"""

__version__ = "0.1.0"

from .core import (
    DispatchEngine,
    EngineMode,
    Event,
    EventHandler,
    EventTypeRegistry,
    HandlerRegistry,
    StreamProcessorRegistry,
)
from .configuration import EasyEventsConfiguration
from .replay import ReplayController, ReplayResult

__all__ = [
    "DispatchEngine",
    "EasyEventsConfiguration",
    "EngineMode",
    "Event",
    "EventHandler",
    "EventTypeRegistry",
    "HandlerRegistry",
    "ReplayController",
    "ReplayResult",
    "StreamProcessorRegistry",
]
