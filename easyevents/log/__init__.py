"""
Event storage and integrity verification.

This module provides:
- EventStore: Abstract interface for event persistence
- InMemoryEventStore: List-backed storage
- FileEventStore: File-based append-only storage (JSONL)
- S3EventStore: S3-based append-only storage (one object per record)
- Integrity: Hash chain verification
"""

from .store import EventStore, StoredRecord
from .memory_store import InMemoryEventStore
from .file_store import FileEventStore
from .integrity import ZERO_HASH, chain_record, hash_record, verify_chain

# S3EventStore is optional (requires boto3)
try:
    from .s3_store import S3EventStore

    __all__ = [
        "EventStore",
        "StoredRecord",
        "InMemoryEventStore",
        "FileEventStore",
        "S3EventStore",
        "ZERO_HASH",
        "chain_record",
        "hash_record",
        "verify_chain",
    ]
except ImportError:
    __all__ = [
        "EventStore",
        "StoredRecord",
        "InMemoryEventStore",
        "FileEventStore",
        "ZERO_HASH",
        "chain_record",
        "hash_record",
        "verify_chain",
    ]
