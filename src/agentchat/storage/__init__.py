"""Message persistence — record store over a flat key-value substrate."""

from agentchat.storage.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from agentchat.storage.records import MESSAGES_KEY, SEEDED_KEY, RecordStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "RecordStore",
    "MESSAGES_KEY",
    "SEEDED_KEY",
]
