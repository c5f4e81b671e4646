"""
Handler capability and static handler resolution.

A handler is bound one-to-one to an event's concrete class. The binding is
declared by subscripting the generic base:

    class SimpleTextEventHandler(EventHandler[SimpleTextEvent]):
        async def handle(self, event):
            ...

Resolvers are plain callables ``event_type -> handler | None``. The engine
validates whatever a resolver returns with handles_exactly().
"""

import typing
from typing import Any, Awaitable, Callable, ClassVar, Dict, Generic, Optional, TypeVar

from .errors import DuplicateHandlerError, HandlerContractMismatch

E = TypeVar("E")

HandlerResolver = Callable[[type], Any]


class EventHandler(Generic[E]):
    """
    Generic handler capability.

    The handled class is taken from the subscripted base, or from an
    explicit ``event_type`` class attribute.
    """

    event_type: ClassVar[Optional[type]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("event_type") is not None:
            return
        for base in cls.__dict__.get("__orig_bases__", ()):
            if typing.get_origin(base) is not EventHandler:
                continue
            args = typing.get_args(base)
            if args and isinstance(args[0], type):
                cls.event_type = args[0]
                return

    def handle(self, event: E) -> Optional[Awaitable[None]]:
        """Handle one event. Subclasses must override; may be sync or async."""
        raise NotImplementedError


def handles_exactly(handler: Any, event_type: type) -> bool:
    """True only if handler is an EventHandler declared for exactly event_type."""
    if not isinstance(handler, EventHandler):
        return False
    return type(handler).event_type is event_type


class HandlerRegistry:
    """
    Static resolver: one handler factory per event class.

    Usage:
        handlers = HandlerRegistry()
        handlers.register(SimpleTextEventHandler(received))
        handlers.register_factory(NullEvent, NullEventHandler)
        handler = handlers(SimpleTextEvent)

    Factories are called on every resolve; nothing is cached across raises.
    """

    def __init__(self) -> None:
        self._factories: Dict[type, Callable[[], Any]] = {}

    def register(self, handler: EventHandler) -> None:
        """
        Register a handler instance for the class it declares.

        Raises:
            TypeError: If handler is not an EventHandler with a declared event type
            DuplicateHandlerError: If the event class already has a handler
        """
        if not isinstance(handler, EventHandler) or type(handler).event_type is None:
            raise TypeError(f"{type(handler).__name__} does not declare an EventHandler event type")
        self.register_factory(type(handler).event_type, lambda: handler)

    def register_factory(self, event_type: type, factory: Callable[[], Any]) -> None:
        """
        Register a zero-argument factory producing the handler for event_type.

        Handler classes are checked here; other callables are checked by the
        engine on every resolve.

        Raises:
            HandlerContractMismatch: If factory is a handler class for another event type
            DuplicateHandlerError: If the event class already has a handler
        """
        if isinstance(factory, type):
            if not issubclass(factory, EventHandler) or factory.event_type is not event_type:
                raise HandlerContractMismatch(event_type.__name__)
        if event_type in self._factories:
            raise DuplicateHandlerError(f"Handler already registered for {event_type.__name__}")
        self._factories[event_type] = factory

    def __contains__(self, event_type: type) -> bool:
        return event_type in self._factories

    def __call__(self, event_type: type) -> Any:
        factory = self._factories.get(event_type)
        if factory is None:
            return None
        return factory()

    resolve = __call__
