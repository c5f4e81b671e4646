"""
In-memory event store.
"""

from typing import Any, Iterator, List, Optional

from ..core.events import event_type_name, require_stream
from .store import EventStore, StoredRecord


class InMemoryEventStore(EventStore):
    """List-backed store; the log lives as long as the process."""

    def __init__(self) -> None:
        self._records: List[StoredRecord] = []

    def append(self, event: Any) -> int:
        position = len(self._records)
        self._records.append(
            StoredRecord(
                position=position,
                event=event,
                stream=require_stream(event),
                type_name=event_type_name(event),
            )
        )
        return position

    def read(self, stream: Optional[str] = None, from_position: int = 0) -> Iterator[StoredRecord]:
        for rec in list(self._records[from_position:]):
            if stream is not None and rec.stream != stream:
                continue
            yield rec

    def read_all(self) -> List[StoredRecord]:
        return list(self._records)

    @property
    def events(self) -> List[Any]:
        """Stored events in log order."""
        return [rec.event for rec in self._records]

    def __len__(self) -> int:
        return len(self._records)
