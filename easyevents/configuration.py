"""
Engine configuration.

Environment Variables:
    EASYEVENTS_STORE: Store backend (memory, file, s3) - default: memory
    EASYEVENTS_STORE_PATH: JSONL path for the file backend
    EASYEVENTS_S3_BUCKET: Bucket for the s3 backend
    EASYEVENTS_S3_PREFIX: Key prefix for the s3 backend - default: events
    EASYEVENTS_S3_ENDPOINT: Custom S3 endpoint (MinIO, localstack, etc.)
    EASYEVENTS_MAX_DEPTH: Bound on nested raise depth, "none" to disable - default: 100
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from .core.clock import SystemClock
from .core.handlers import HandlerResolver
from .core.registry import EventTypeRegistry
from .log.file_store import FileEventStore
from .log.memory_store import InMemoryEventStore
from .log.store import EventStore

DEFAULT_MAX_DEPTH = 100


@dataclass
class EasyEventsConfiguration:
    """
    Collaborators of a DispatchEngine.

    Fields:
        store: Append-only event log
        handler_resolver: Callable event_type -> handler or None (None = no handlers)
        clock: Time source used to stamp event timestamps
        max_depth: Deepest allowed nested raise (None = unbounded)
    """
    store: EventStore = field(default_factory=InMemoryEventStore)
    handler_resolver: Optional[HandlerResolver] = None
    clock: Any = field(default_factory=SystemClock)
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH

    @classmethod
    def from_env(
        cls,
        registry: Optional[EventTypeRegistry] = None,
        handler_resolver: Optional[HandlerResolver] = None,
    ) -> "EasyEventsConfiguration":
        """
        Build a configuration from EASYEVENTS_* environment variables.

        Raises:
            ValueError: If a variable holds an unsupported value
        """
        return cls(
            store=_store_from_env(registry),
            handler_resolver=handler_resolver,
            max_depth=_max_depth_from_env(),
        )


def _store_from_env(registry: Optional[EventTypeRegistry]) -> EventStore:
    backend = os.getenv("EASYEVENTS_STORE", "memory").strip().lower()

    if backend == "memory":
        return InMemoryEventStore()

    if backend == "file":
        path = os.getenv("EASYEVENTS_STORE_PATH")
        if not path:
            raise ValueError("EASYEVENTS_STORE_PATH is required when EASYEVENTS_STORE=file")
        return FileEventStore(path, registry=registry)

    if backend == "s3":
        bucket = os.getenv("EASYEVENTS_S3_BUCKET")
        if not bucket:
            raise ValueError("EASYEVENTS_S3_BUCKET is required when EASYEVENTS_STORE=s3")
        from .log.s3_store import S3EventStore

        return S3EventStore(
            bucket=bucket,
            prefix=os.getenv("EASYEVENTS_S3_PREFIX", "events"),
            registry=registry,
            endpoint_url=os.getenv("EASYEVENTS_S3_ENDPOINT") or None,
        )

    raise ValueError(f"unsupported EASYEVENTS_STORE: {backend}")


def _max_depth_from_env() -> Optional[int]:
    val = os.getenv("EASYEVENTS_MAX_DEPTH")
    if not val:
        return DEFAULT_MAX_DEPTH
    if val.strip().lower() == "none":
        return None
    try:
        parsed = int(val)
    except ValueError:
        raise ValueError(f"EASYEVENTS_MAX_DEPTH must be an integer or 'none': {val}") from None
    if parsed < 0:
        raise ValueError(f"EASYEVENTS_MAX_DEPTH must be >= 0: {val}")
    return parsed
