"""
Execution context of a raise tree.

Mode and depth are carried in a ContextVar rather than on the engine, so a
nested raise inherits the mode of the raise that triggered it while two
top-level calls running in separate asyncio tasks stay independent.
"""

import contextvars
import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


class EngineMode(enum.Enum):
    NORMAL = "normal"
    REPLAYING = "replaying"


@dataclass(frozen=True)
class DispatchContext:
    """
    Fields:
        mode: NORMAL persists raised events, REPLAYING suppresses persistence
        depth: 0 for a top-level raise, +1 per nested raise
    """
    mode: EngineMode = EngineMode.NORMAL
    depth: int = 0

    def nested(self, mode: Optional[EngineMode] = None) -> "DispatchContext":
        if self.mode is EngineMode.REPLAYING:
            mode = EngineMode.REPLAYING
        return DispatchContext(mode=mode or self.mode, depth=self.depth + 1)


_current: contextvars.ContextVar[Optional[DispatchContext]] = contextvars.ContextVar(
    "easyevents_dispatch_context", default=None
)


def current_context() -> Optional[DispatchContext]:
    """Context of the enclosing raise, or None outside any raise."""
    return _current.get()


def enter(mode: Optional[EngineMode] = None) -> DispatchContext:
    """
    Compute the context for a raise about to start.

    A nested raise inherits the enclosing mode unless REPLAYING is asked
    for explicitly. REPLAYING is sticky: nothing raised inside a replay can
    switch back to NORMAL and reach the store. A top-level raise defaults
    to NORMAL.
    """
    outer = _current.get()
    if outer is None:
        return DispatchContext(mode=mode or EngineMode.NORMAL, depth=0)
    return outer.nested(mode)


@contextmanager
def activate(ctx: DispatchContext) -> Iterator[DispatchContext]:
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        _current.reset(token)
