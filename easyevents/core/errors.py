"""
Exception types for the event dispatch engine.
"""


class EasyEventsError(Exception):
    """Base class for errors raised by the engine itself."""
    pass


class HandlerContractMismatch(EasyEventsError):
    """Raised when the resolver returns an object that cannot handle the event type."""

    capability_name = "EventHandler"

    def __init__(self, event_type_name: str) -> None:
        self.event_type_name = event_type_name
        super().__init__(
            f"Cannot handle {event_type_name}. Handler returned from Factory does not "
            f"implement {self.capability_name}<{event_type_name}>"
        )


class DuplicateHandlerError(EasyEventsError):
    """Raised when a second handler is registered for the same event type."""
    pass


class EventStoreError(EasyEventsError):
    """Raised when event store operations fail."""
    pass


class IntegrityError(EventStoreError):
    """Raised when hash chain verification of a stored log fails."""
    pass


class InvalidEventError(EasyEventsError):
    """Raised when an object raised as an event has no string stream."""
    pass


class UnknownEventTypeError(EasyEventsError):
    """Raised when a stored type name has no registered constructor."""
    pass


class DuplicateEventTypeError(EasyEventsError):
    """Raised when a type name is registered twice for different classes."""
    pass


class RecursionDepthExceeded(EasyEventsError):
    """Raised when nested raises go deeper than the configured bound."""

    def __init__(self, depth: int, max_depth: int) -> None:
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(f"Nested raise depth {depth} exceeds max_depth={max_depth}")
