"""
Hash chain integrity for durable logs.

Each stored record carries the hash of the previous record, so editing,
dropping or reordering lines breaks the chain.
"""

import hashlib
from typing import Any, Dict, Iterable

from ..core.codec import canonical_json_bytes
from ..core.errors import IntegrityError

ZERO_HASH = "0" * 64


def hash_record(prev_hash: str, record: Dict[str, Any]) -> str:
    """
    Compute hash of a record chained to the previous hash.

    Hash input: prev_hash + canonical_json(record)

    Returns:
        SHA-256 hash as hex string
    """
    b = prev_hash.encode("utf-8") + canonical_json_bytes(record)
    return hashlib.sha256(b).hexdigest()


def chain_record(prev_hash: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create hash chain entry for storage.

    Returns:
        {"prev_hash": ..., "record_hash": ..., "record": {...}}
    """
    return {
        "prev_hash": prev_hash,
        "record_hash": hash_record(prev_hash, record),
        "record": record,
    }


def verify_link(prev_hash: str, expected_position: int, entry: Dict[str, Any]) -> str:
    """
    Verify one chain entry against its predecessor.

    Returns:
        The entry's record_hash (the prev_hash of the next entry)

    Raises:
        IntegrityError: On a broken link, a position gap or a hash mismatch
    """
    record = entry.get("record", {})
    position = record.get("position")
    if position != expected_position:
        raise IntegrityError(
            f"Position gap detected: expected position={expected_position}, got {position}"
        )
    if entry.get("prev_hash") != prev_hash:
        raise IntegrityError(
            f"Hash chain broken at position={position}: "
            f"expected prev_hash={prev_hash}, got {entry.get('prev_hash')}"
        )
    recomputed = hash_record(prev_hash, record)
    if recomputed != entry.get("record_hash"):
        raise IntegrityError(
            f"Hash mismatch at position={position}: "
            f"expected {entry.get('record_hash')}, recomputed {recomputed}"
        )
    return recomputed


def verify_chain(entries: Iterable[Dict[str, Any]]) -> int:
    """
    Verify a whole chain from genesis.

    Returns:
        Number of verified entries
    """
    prev_hash = ZERO_HASH
    count = 0
    for entry in entries:
        prev_hash = verify_link(prev_hash, count, entry)
        count += 1
    return count
