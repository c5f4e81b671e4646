"""
File-based event store using append-only JSONL format.

Each line is a hash chain entry with prev_hash, record_hash and the record.
"""

import json
import os
from typing import Any, Dict, Iterator, Optional, Tuple

from ..core.codec import canonical_json_str, decode_event, encode_event
from ..core.errors import EventStoreError, IntegrityError
from ..core.registry import EventTypeRegistry
from .integrity import ZERO_HASH, chain_record, verify_chain, verify_link
from .store import EventStore, StoredRecord

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FileEventStore(EventStore):
    """
    File-based append-only event store.

    Storage format: JSONL (newline-delimited JSON)
    Each line: {"prev_hash": "...", "record_hash": "...", "record": {...}}

    Guarantees:
    - Append-only (no mutations)
    - Fsync after each append (durability)
    - Hash chain integrity, verified on every read
    """

    def __init__(self, path: str, registry: Optional[EventTypeRegistry] = None) -> None:
        """
        Args:
            path: Path to JSONL file
            registry: Type name registry used to rebuild events on read
        """
        self.path = path
        self.registry = registry if registry is not None else EventTypeRegistry()

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        if not os.path.exists(path):
            with open(path, "wb") as f:
                f.write(b"")

    def _last_position_and_hash(self, f) -> Tuple[int, str]:
        """
        Read last position and hash from log.

        Returns:
            (-1, ZERO_HASH) if log is empty
        """
        last_position = -1
        last_hash = ZERO_HASH

        f.seek(0)
        for line in f:
            if not line.strip():
                continue
            entry = json.loads(line)
            last_position = entry["record"]["position"]
            last_hash = entry["record_hash"]

        return last_position, last_hash

    def append(self, event: Any) -> int:
        """
        Append event to log with hash chain.

        Returns:
            Position assigned to the event

        Raises:
            EventStoreError: If the file cannot be written or the event
                cannot be serialized
        """
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    last_position, last_hash = self._last_position_and_hash(f)
                    position = last_position + 1

                    record = encode_event(event, position, self.registry)
                    line = canonical_json_str(chain_record(last_hash, record)) + "\n"

                    f.seek(0, os.SEEK_END)
                    f.write(line.encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            return position
        except (OSError, TypeError, ValueError, KeyError) as ex:
            raise EventStoreError(f"Failed to append to {self.path}: {ex}") from ex

    def entries(self) -> Iterator[Dict[str, Any]]:
        """
        Raw chain entries in file order, without verification.

        Raises:
            IntegrityError: If a line is not valid JSON
        """
        try:
            with open(self.path, "rb") as f:
                for lineno, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        yield json.loads(line)
                    except json.JSONDecodeError as ex:
                        raise IntegrityError(f"{self.path}:{lineno}: corrupt line: {ex}") from ex
        except OSError as ex:
            raise EventStoreError(f"Failed to read {self.path}: {ex}") from ex

    def read(self, stream: Optional[str] = None, from_position: int = 0) -> Iterator[StoredRecord]:
        """
        Read records from log, verifying the chain from genesis.

        Raises:
            IntegrityError: If the chain is broken
            UnknownEventTypeError: If a stored type is not registered
        """
        prev_hash = ZERO_HASH
        for expected, entry in enumerate(self.entries()):
            prev_hash = verify_link(prev_hash, expected, entry)
            record = entry["record"]

            if record["position"] < from_position:
                continue
            if stream is not None and record["stream"] != stream:
                continue

            yield StoredRecord(
                position=record["position"],
                event=decode_event(record, self.registry),
                stream=record["stream"],
                type_name=record["type"],
            )

    def verify(self) -> int:
        """
        Verify the whole chain.

        Returns:
            Number of verified entries
        """
        return verify_chain(self.entries())

    def get_last_hash(self) -> Optional[str]:
        try:
            with open(self.path, "rb") as f:
                _, last_hash = self._last_position_and_hash(f)
        except OSError as ex:
            raise EventStoreError(f"Failed to read {self.path}: {ex}") from ex
        return last_hash if last_hash != ZERO_HASH else None

    def __len__(self) -> int:
        return sum(1 for _ in self.entries())
