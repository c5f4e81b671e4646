"""
Dispatch engine: persist, handle, process.

For every raised event, in this order:
1. append to the store (NORMAL mode only)
2. resolve and await at most one handler
3. await the stream's processors

A raise made from inside a handler or processor is resolved completely,
depth-first, before the code that raised it continues. The engine catches
nothing: store, handler and processor errors reach the top-level caller.
"""

import inspect
import logging
from typing import Any, Optional

from ..configuration import EasyEventsConfiguration
from ..replay.controller import ReplayController, ReplayResult
from . import context
from .context import EngineMode
from .errors import HandlerContractMismatch, RecursionDepthExceeded
from .events import event_type_name, populate_timestamp, require_stream
from .handlers import handles_exactly
from .processors import Processor, StreamProcessorRegistry

logger = logging.getLogger(__name__)


class DispatchEngine:
    """
    Event dispatch and replay engine.

    Usage:
        engine = DispatchEngine(EasyEventsConfiguration(handler_resolver=handlers))
        engine.add_processor_for_stream("TestStream", count_events)
        await engine.raise_event(SimpleTextEvent("test"))
        await engine.replay_all_events()

    Mode and depth live in the dispatch context of the running task. Stream
    state is shared engine state: overlapping top-level calls must be
    serialized by the caller.
    """

    def __init__(
        self,
        configuration: Optional[EasyEventsConfiguration] = None,
        processors: Optional[StreamProcessorRegistry] = None,
    ) -> None:
        self.processors = processors if processors is not None else StreamProcessorRegistry()
        self.configure(configuration or EasyEventsConfiguration())

    def configure(self, configuration: EasyEventsConfiguration) -> None:
        """
        Swap store, resolver, clock and depth bound.

        Registered processors and their stream state are kept.
        """
        self.store = configuration.store
        self.handler_resolver = configuration.handler_resolver
        self.clock = configuration.clock
        self.max_depth = configuration.max_depth

    def add_processor_for_stream(self, stream_id: str, callback: Processor) -> None:
        self.processors.register(stream_id, callback)

    @property
    def current_mode(self) -> EngineMode:
        ctx = context.current_context()
        return ctx.mode if ctx is not None else EngineMode.NORMAL

    @property
    def current_depth(self) -> int:
        ctx = context.current_context()
        return ctx.depth if ctx is not None else 0

    async def raise_event(self, event: Any, mode: Optional[EngineMode] = None) -> None:
        """
        Raise an event.

        Args:
            event: Event instance with a string ``stream``
            mode: Mode of a top-level raise (default NORMAL). Nested raises
                inherit the enclosing mode.

        Raises:
            InvalidEventError: If the event has no stream
            RecursionDepthExceeded: If nesting goes past max_depth
            HandlerContractMismatch: If the resolver returns a wrong handler
            EventStoreError: If the append fails
        """
        stream = require_stream(event)
        ctx = context.enter(mode)
        if self.max_depth is not None and ctx.depth > self.max_depth:
            raise RecursionDepthExceeded(ctx.depth, self.max_depth)

        log_extra = {"trace_id": stream}
        with context.activate(ctx):
            if ctx.mode is EngineMode.NORMAL:
                populate_timestamp(event, self.clock.utcnow())
                position = self.store.append(event)
                logger.debug(
                    "Appended %s at position %d (depth=%d)",
                    event_type_name(event),
                    position,
                    ctx.depth,
                    extra=log_extra,
                )
            else:
                logger.debug(
                    "Replaying %s (depth=%d)",
                    event_type_name(event),
                    ctx.depth,
                    extra=log_extra,
                )

            await self._handle(event)
            await self.processors.run(stream, event)

    async def _handle(self, event: Any) -> None:
        if self.handler_resolver is None:
            return

        event_type = type(event)
        handler = self.handler_resolver(event_type)
        if handler is None:
            logger.debug(
                "No handler for %s", event_type.__name__, extra={"trace_id": event.stream}
            )
            return

        if not handles_exactly(handler, event_type):
            raise HandlerContractMismatch(event_type.__name__)

        result = handler.handle(event)
        if inspect.isawaitable(result):
            await result

    async def replay_all_events(self, reset_state: bool = False) -> ReplayResult:
        """Re-drive the whole log without persisting. See ReplayController."""
        return await ReplayController(self).replay_all(reset_state=reset_state)
