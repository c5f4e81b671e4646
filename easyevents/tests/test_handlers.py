"""
Tests for handler capability declaration and the static handler registry.
"""

import pytest

from easyevents.core.errors import DuplicateHandlerError, HandlerContractMismatch
from easyevents.core.handlers import EventHandler, HandlerRegistry, handles_exactly
from easyevents.tests.sample_events import (
    NullEvent,
    NullEventHandler,
    SimpleTextEvent,
    SimpleTextEventHandler,
)


def test_event_type_comes_from_generic_base():
    assert SimpleTextEventHandler.event_type is SimpleTextEvent
    assert NullEventHandler.event_type is NullEvent


def test_explicit_event_type_attribute():
    class Explicit(EventHandler):
        event_type = NullEvent

        def handle(self, event):
            pass

    assert handles_exactly(Explicit(), NullEvent)


def test_subclass_of_concrete_handler_keeps_event_type():
    class Louder(SimpleTextEventHandler):
        pass

    assert Louder.event_type is SimpleTextEvent


def test_handler_without_handle_override_raises():
    class Forgetful(EventHandler[NullEvent]):
        pass

    with pytest.raises(NotImplementedError):
        Forgetful().handle(NullEvent())


def test_handles_exactly():
    handler = SimpleTextEventHandler([])

    assert handles_exactly(handler, SimpleTextEvent)
    assert not handles_exactly(handler, NullEvent)
    assert not handles_exactly(object(), SimpleTextEvent)


def test_generic_without_concrete_type_handles_nothing():
    class Undeclared(EventHandler):
        def handle(self, event):
            pass

    assert Undeclared.event_type is None
    assert not handles_exactly(Undeclared(), SimpleTextEvent)


def test_registry_resolves_registered_instance():
    handlers = HandlerRegistry()
    handler = SimpleTextEventHandler([])
    handlers.register(handler)

    assert handlers(SimpleTextEvent) is handler
    assert handlers.resolve(SimpleTextEvent) is handler
    assert handlers(NullEvent) is None
    assert SimpleTextEvent in handlers


def test_registry_factory_is_called_on_every_resolve():
    handlers = HandlerRegistry()
    handlers.register_factory(NullEvent, NullEventHandler)

    first = handlers(NullEvent)
    second = handlers(NullEvent)

    assert isinstance(first, NullEventHandler)
    assert first is not second


def test_registry_rejects_handler_class_for_other_event():
    handlers = HandlerRegistry()

    with pytest.raises(HandlerContractMismatch) as exc_info:
        handlers.register_factory(SimpleTextEvent, NullEventHandler)

    assert str(exc_info.value) == (
        "Cannot handle SimpleTextEvent. Handler returned from Factory does not "
        "implement EventHandler<SimpleTextEvent>"
    )


def test_registry_rejects_duplicates():
    handlers = HandlerRegistry()
    handlers.register(NullEventHandler())

    with pytest.raises(DuplicateHandlerError):
        handlers.register(NullEventHandler())


def test_registry_rejects_undeclared_handlers():
    handlers = HandlerRegistry()

    with pytest.raises(TypeError):
        handlers.register(object())
