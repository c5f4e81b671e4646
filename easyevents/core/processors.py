"""
Stream processors: stream-scoped callbacks with persistent state.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Processor signature: (stream_state, event) -> None or awaitable
Processor = Callable[["StreamState", Any], Optional[Awaitable[None]]]


class StreamState(dict):
    """
    Mutable key-value state owned by one stream.

    One instance exists per stream id for the lifetime of the registry.
    """

    def __init__(self, stream_id: str) -> None:
        super().__init__()
        self.stream_id = stream_id

    def __repr__(self) -> str:
        return f"StreamState({self.stream_id!r}, {dict.__repr__(self)})"


class StreamProcessorRegistry:
    """
    Maps stream ids to ordered processor callbacks.

    Usage:
        processors = StreamProcessorRegistry()
        processors.register("TestStream", count_events)
        await processors.run("TestStream", event)
    """

    def __init__(self) -> None:
        self._processors: Dict[str, List[Processor]] = defaultdict(list)
        self._states: Dict[str, StreamState] = {}

    def register(self, stream_id: str, callback: Processor) -> None:
        """
        Append a callback for stream_id. All callbacks of a stream run in
        registration order.
        """
        if not callable(callback):
            raise TypeError(f"Processor for stream {stream_id!r} is not callable")
        self._processors[stream_id].append(callback)

    def state_for(self, stream_id: str) -> StreamState:
        """Get the stream's state, creating it on first access."""
        state = self._states.get(stream_id)
        if state is None:
            state = StreamState(stream_id)
            self._states[stream_id] = state
        return state

    def callbacks_for(self, stream_id: str) -> List[Processor]:
        return list(self._processors.get(stream_id, ()))

    def streams(self) -> List[str]:
        return sorted(self._processors)

    def reset(self, stream_id: Optional[str] = None) -> None:
        """
        Clear stream state in place (one stream, or all when stream_id is None).

        State objects keep their identity; only their contents are dropped.
        """
        targets = [stream_id] if stream_id is not None else list(self._states)
        for sid in targets:
            if sid in self._states:
                self._states[sid].clear()

    async def run(self, stream_id: str, event: Any) -> None:
        """
        Run every callback registered for stream_id against event.

        Each callback is awaited before the next starts. Errors propagate.
        """
        callbacks = self._processors.get(stream_id)
        if not callbacks:
            return

        state = self.state_for(stream_id)
        # Snapshot so registrations made by a callback apply from the next event.
        for callback in list(callbacks):
            logger.debug(
                "Running processor %r",
                callback,
                extra={"trace_id": stream_id},
            )
            result = callback(state, event)
            if inspect.isawaitable(result):
                await result
