"""Whole-collection persistence of chat messages."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import TypeAdapter, ValidationError

from agentchat.errors.exceptions import FilesystemFailure, SerializationFailure
from agentchat.storage.kv import KeyValueStore
from agentchat.types import MessageRecord, sort_by_timestamp

logger = logging.getLogger(__name__)

MESSAGES_KEY = "cached_messages"
SEEDED_KEY = "has_seeded_data"

_TRUE = b"true"

_records_adapter = TypeAdapter(list[MessageRecord])


def encode_records(records: Iterable[MessageRecord]) -> bytes:
    """Serialize a message list to its JSON blob."""
    try:
        return _records_adapter.dump_json(list(records), by_alias=True)
    except (ValueError, TypeError) as e:
        raise SerializationFailure(f"Cannot encode messages: {e}", original=e) from e


def decode_records(blob: bytes) -> list[MessageRecord]:
    """Deserialize a JSON blob back into message records."""
    try:
        return _records_adapter.validate_json(blob)
    except ValidationError as e:
        raise SerializationFailure(
            f"Stored messages are corrupt ({e.error_count()} errors)", original=e
        ) from e
    except ValueError as e:
        raise SerializationFailure(f"Stored messages are corrupt: {e}", original=e) from e


class RecordStore:
    """Persists the full message list under one key, plus a seed flag.

    Every save replaces the stored blob wholesale. Failures are logged and
    reported through return values; nothing is raised to the caller.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, records: Iterable[MessageRecord]) -> bool:
        """Serialize and store ``records``. Returns False if that failed."""
        try:
            blob = encode_records(records)
            self._store.set(MESSAGES_KEY, blob)
        except (SerializationFailure, FilesystemFailure) as e:
            logger.error("Failed to save messages: %s", e.message)
            return False
        return True

    def load(self) -> list[MessageRecord]:
        """Return stored messages oldest first; [] if absent or unreadable."""
        try:
            blob = self._store.get(MESSAGES_KEY)
        except FilesystemFailure as e:
            logger.error("Failed to load messages: %s", e.message)
            return []
        if blob is None:
            return []
        try:
            records = decode_records(blob)
        except SerializationFailure as e:
            logger.error("Failed to load messages: %s", e.message)
            return []
        return sort_by_timestamp(records)

    def clear(self) -> None:
        """Remove the stored messages and the seed flag."""
        try:
            self._store.delete(MESSAGES_KEY, SEEDED_KEY)
        except FilesystemFailure as e:
            logger.error("Failed to clear messages: %s", e.message)

    def has_existing(self) -> bool:
        try:
            return self._store.contains(MESSAGES_KEY)
        except FilesystemFailure as e:
            logger.error("Failed to query message store: %s", e.message)
            return False

    def has_seeded(self) -> bool:
        try:
            return self._store.get(SEEDED_KEY) == _TRUE
        except FilesystemFailure as e:
            logger.error("Failed to query seed flag: %s", e.message)
            return False

    def mark_seeded(self) -> None:
        try:
            self._store.set(SEEDED_KEY, _TRUE)
        except FilesystemFailure as e:
            logger.error("Failed to mark seed data loaded: %s", e.message)

    def append(
        self,
        record: MessageRecord,
        current: list[MessageRecord] | None = None,
    ) -> list[MessageRecord]:
        """Add ``record`` to the message list and persist the whole list.

        ``current`` is the caller's in-memory list; when omitted the stored
        list is loaded. The returned list is the new in-memory copy, even if
        persisting it failed.
        """
        records = list(current) if current is not None else self.load()
        records.append(record)
        self.save(records)
        return records

    def load_or_seed(self, seed: Callable[[], Iterable[MessageRecord]]) -> list[MessageRecord]:
        """Load stored messages, or persist ``seed()`` on first launch."""
        records = self.load()
        if records:
            return records
        records = sort_by_timestamp(list(seed()))
        if self.save(records):
            self.mark_seeded()
        return records
