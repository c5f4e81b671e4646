"""
Tests for the stream processor registry.
"""

import pytest

from easyevents.core.processors import StreamProcessorRegistry, StreamState
from easyevents.tests.sample_events import SimpleTextEvent


@pytest.mark.asyncio
async def test_processors_run_in_registration_order():
    processors = StreamProcessorRegistry()
    calls = []

    async def first(state, event):
        calls.append("first")

    def second(state, event):
        calls.append("second")

    processors.register("S", first)
    processors.register("S", second)

    await processors.run("S", SimpleTextEvent("x", "S"))
    await processors.run("S", SimpleTextEvent("y", "S"))

    assert calls == ["first", "second", "first", "second"]


@pytest.mark.asyncio
async def test_state_is_created_lazily_and_shared():
    processors = StreamProcessorRegistry()
    states = []
    processors.register("S", lambda s, e: states.append(s))
    processors.register("S", lambda s, e: states.append(s))

    await processors.run("S", SimpleTextEvent("x", "S"))

    assert len(states) == 2
    assert states[0] is states[1]
    assert isinstance(states[0], StreamState)
    assert states[0].stream_id == "S"
    assert processors.state_for("S") is states[0]


@pytest.mark.asyncio
async def test_unregistered_stream_is_a_no_op():
    processors = StreamProcessorRegistry()

    await processors.run("Nobody", SimpleTextEvent("x", "Nobody"))

    assert processors.streams() == []


def test_streams_have_separate_state():
    processors = StreamProcessorRegistry()

    a = processors.state_for("A")
    b = processors.state_for("B")
    a["n"] = 1

    assert a is not b
    assert "n" not in b


def test_reset_clears_contents_but_keeps_identity():
    processors = StreamProcessorRegistry()
    a = processors.state_for("A")
    b = processors.state_for("B")
    a["n"] = 1
    b["n"] = 2

    processors.reset("A")
    assert a == {}
    assert b == {"n": 2}

    processors.reset()
    assert processors.state_for("B") is b
    assert b == {}


def test_register_rejects_non_callables():
    processors = StreamProcessorRegistry()

    with pytest.raises(TypeError):
        processors.register("S", "not a callback")


@pytest.mark.asyncio
async def test_processor_registered_during_run_applies_from_next_event():
    processors = StreamProcessorRegistry()
    calls = []

    def late(state, event):
        calls.append("late")

    def registrar(state, event):
        calls.append("registrar")
        if "late" not in state:
            state["late"] = True
            processors.register("S", late)

    processors.register("S", registrar)

    await processors.run("S", SimpleTextEvent("x", "S"))
    assert calls == ["registrar"]

    await processors.run("S", SimpleTextEvent("y", "S"))
    assert calls == ["registrar", "registrar", "late"]
    assert len(processors.callbacks_for("S")) == 2
