"""
Explicit event type registry.

Durable stores persist events by type name. Turning a name back into an
event needs a constructor, which the host application registers up front:

    registry = EventTypeRegistry()

    @registry.register_event_type
    @dataclass
    class AppStarted(Event):
        ...

    registry.register_event_type("LegacyName", make_app_started)
"""

from typing import Any, Callable, Dict, List, Optional, Union

from .errors import DuplicateEventTypeError, UnknownEventTypeError
from .events import event_type_name

EventFactory = Callable[..., Any]


class EventTypeRegistry:
    """Registry of type name -> event factory."""

    def __init__(self) -> None:
        self._factories: Dict[str, EventFactory] = {}
        self._names: Dict[type, str] = {}

    def register_event_type(
        self, name_or_class: Union[str, type], factory: Optional[EventFactory] = None
    ) -> Any:
        """
        Register an event class (or a name with its factory).

        When given a class, the class name is used and the class itself is
        returned, so this works as a decorator.

        Raises:
            DuplicateEventTypeError: If the name is bound to a different factory
        """
        if isinstance(name_or_class, type):
            cls = name_or_class
            self._add(cls.__name__, factory or cls)
            self._names[cls] = cls.__name__
            return cls

        if factory is None:
            raise TypeError(f"factory is required when registering {name_or_class!r} by name")
        self._add(name_or_class, factory)
        if isinstance(factory, type):
            self._names.setdefault(factory, name_or_class)
        return factory

    def _add(self, name: str, factory: EventFactory) -> None:
        existing = self._factories.get(name)
        if existing is not None and existing is not factory:
            raise DuplicateEventTypeError(f"Event type name already registered: {name}")
        self._factories[name] = factory

    def resolve(self, name: str) -> EventFactory:
        """
        Get the factory registered for name.

        Raises:
            UnknownEventTypeError: If name was never registered
        """
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownEventTypeError(f"No event type registered for name: {name}")
        return factory

    def name_for(self, event: Any) -> str:
        """Stored name for an event: its registered name, else its class name."""
        cls = event if isinstance(event, type) else type(event)
        return self._names.get(cls, event_type_name(cls))

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)
