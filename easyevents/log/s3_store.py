"""
S3-based event store using one-object-per-record pattern.

Each record is stored as a separate S3 object with key: {prefix}/{position:010d}.json
Body format: {"prev_hash": "...", "record_hash": "...", "record": {...}}

Zero-padded positions keep lexicographic key order equal to log order.
Objects are created with If-None-Match so two writers can never overwrite
the same position.
"""

import json
from typing import Any, Dict, Iterator, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.codec import canonical_json_str, decode_event, encode_event
from ..core.errors import EventStoreError
from ..core.registry import EventTypeRegistry
from .integrity import ZERO_HASH, chain_record, verify_link
from .store import EventStore, StoredRecord


class S3EventStore(EventStore):
    """
    S3-based append-only event store.

    Paginator: list_objects_v2 returns max 1000 keys per call, so all
    listings go through the paginator.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "events",
        registry: Optional[EventTypeRegistry] = None,
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
        max_retries: int = 3,
    ) -> None:
        """
        Args:
            bucket: S3 bucket name
            prefix: Key prefix for records
            registry: Type name registry used to rebuild events on read
            endpoint_url: S3 endpoint URL (for MinIO, localstack, etc.)
            region: AWS region
            max_retries: Appends retried after losing a position race

        Raises:
            EventStoreError: If the bucket is not accessible
        """
        self.bucket = bucket
        self.prefix = prefix.rstrip("/")
        self.registry = registry if registry is not None else EventTypeRegistry()
        self.max_retries = max_retries

        try:
            self.s3_client = boto3.client("s3", endpoint_url=endpoint_url, region_name=region)
            self.s3_client.head_bucket(Bucket=bucket)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            raise EventStoreError(f"Bucket '{bucket}' not accessible (code: {error_code})") from e
        except BotoCoreError as e:
            raise EventStoreError(f"Failed to create S3 client: {e}") from e

    def _key_for_position(self, position: int) -> str:
        return f"{self.prefix}/{position:010d}.json"

    def _position_from_key(self, key: str) -> Optional[int]:
        if not key.startswith(self.prefix + "/"):
            return None
        basename = key[len(self.prefix) + 1 :]
        if not basename.endswith(".json"):
            return None
        try:
            return int(basename[:-5])
        except ValueError:
            return None

    def _list_keys(self) -> List[Tuple[int, str]]:
        paginator = self.s3_client.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=self.prefix + "/"):
            for obj in page.get("Contents", []):
                position = self._position_from_key(obj["Key"])
                if position is not None:
                    keys.append((position, obj["Key"]))
        keys.sort()
        return keys

    def _get_entry(self, key: str) -> Dict[str, Any]:
        response = self.s3_client.get_object(Bucket=self.bucket, Key=key)
        return json.loads(response["Body"].read().decode("utf-8"))

    def _last_position_and_hash(self) -> Tuple[int, str]:
        keys = self._list_keys()
        if not keys:
            return -1, ZERO_HASH
        position, key = keys[-1]
        return position, self._get_entry(key)["record_hash"]

    def _put_if_absent(self, key: str, body: str) -> bool:
        """
        Put object only if it does not already exist.

        Returns:
            True if committed, False if another writer took the key
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body.encode("utf-8"),
                ContentType="application/json",
                IfNoneMatch="*",
            )
            return True
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("PreconditionFailed", "412"):
                return False
            raise

    def append(self, event: Any) -> int:
        """
        Append event at the next free position.

        Raises:
            EventStoreError: If S3 fails or every retry lost the position race
        """
        try:
            for _ in range(self.max_retries):
                last_position, last_hash = self._last_position_and_hash()
                position = last_position + 1
                try:
                    record = encode_event(event, position, self.registry)
                    body = canonical_json_str(chain_record(last_hash, record))
                except (TypeError, ValueError) as e:
                    raise EventStoreError(f"Event is not serializable: {e}") from e
                if self._put_if_absent(self._key_for_position(position), body):
                    return position
        except (BotoCoreError, ClientError) as e:
            raise EventStoreError(f"Failed to append event to S3: {e}") from e
        raise EventStoreError(f"Append failed after {self.max_retries} conflicts")

    def read(self, stream: Optional[str] = None, from_position: int = 0) -> Iterator[StoredRecord]:
        """
        Read records with hash chain and position continuity validation.

        Raises:
            EventStoreError: If read fails
            IntegrityError: If the chain is broken
        """
        try:
            prev_hash = ZERO_HASH
            for expected, (_, key) in enumerate(self._list_keys()):
                entry = self._get_entry(key)
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
        except (BotoCoreError, ClientError) as e:
            raise EventStoreError(f"Failed to read events from S3: {e}") from e

    def __len__(self) -> int:
        try:
            return len(self._list_keys())
        except (BotoCoreError, ClientError) as e:
            raise EventStoreError(f"Failed to list events in S3: {e}") from e
