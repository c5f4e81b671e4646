"""
Events and handlers shared by the tests.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from easyevents.core.events import Event
from easyevents.core.handlers import EventHandler


@dataclass
class SimpleTextEvent(Event):
    some_test_value: str
    stream: str = "TestStream"


@dataclass
class NullEvent(Event):
    stream: str = "TestStream"


@dataclass
class RaisesAnotherEvent(Event):
    stream: str = "TestStream"


@dataclass
class TaggedEvent(Event):
    tags: set
    stream: str = "TestStream"


@dataclass
class HasTimestampEvent(Event):
    stream: str = "TestStream"
    timestamp: Optional[datetime] = None


@dataclass
class HasWrongTypeTimestampEvent(Event):
    stream: str = "TestStream"
    timestamp: Optional[str] = None


class HasReadOnlyTimestampEvent(Event):
    stream = "TestStream"

    @property
    def timestamp(self) -> Optional[datetime]:
        return None


@dataclass(frozen=True)
class FrozenTimestampEvent(Event):
    stream: str = "TestStream"
    timestamp: Optional[datetime] = None


class SimpleTextEventHandler(EventHandler[SimpleTextEvent]):
    def __init__(self, received: List[SimpleTextEvent]) -> None:
        self.received = received

    async def handle(self, event: SimpleTextEvent) -> None:
        self.received.append(event)


class NullEventHandler(EventHandler[NullEvent]):
    async def handle(self, event: NullEvent) -> None:
        pass


class RaisesAnotherEventHandler(EventHandler[RaisesAnotherEvent]):
    def __init__(self, engine) -> None:
        self.engine = engine

    async def handle(self, event: RaisesAnotherEvent) -> None:
        await self.engine.raise_event(NullEvent())
