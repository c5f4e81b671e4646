"""
EventStore abstract interface.

Defines contract for event storage implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional


@dataclass(frozen=True)
class StoredRecord:
    """
    An event with its position in the log.

    Fields:
        position: Append order, starting at 0, never reused
        event: The stored event
        stream: Stream of the event at append time
        type_name: Stored type name of the event
    """
    position: int
    event: Any
    stream: str
    type_name: str


class EventStore(ABC):
    """
    Abstract event storage interface.

    All implementations must guarantee:
    - Append-only (no updates, no deletes)
    - Sequential ordering (records indexed by position)
    """

    @abstractmethod
    def append(self, event: Any) -> int:
        """
        Append event to log.

        Returns:
            Position assigned to the event

        Raises:
            EventStoreError: If append fails
        """
        ...

    @abstractmethod
    def read(self, stream: Optional[str] = None, from_position: int = 0) -> Iterator[StoredRecord]:
        """
        Read records from log.

        Args:
            stream: Filter by stream (None = all)
            from_position: Start from this position (inclusive)

        Yields:
            Records in position order
        """
        ...

    def read_all(self) -> List[StoredRecord]:
        """Snapshot of the whole log at call time."""
        return list(self.read())

    def __len__(self) -> int:
        return sum(1 for _ in self.read())
