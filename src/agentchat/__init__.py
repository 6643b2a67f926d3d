"""agentchat — image cache and message persistence for the AgentChat client."""

from agentchat.cache.manager import AssetCache
from agentchat.cache.stats import CacheStats, SavedAsset
from agentchat.config.schema import AgentChatConfig
from agentchat.core import AgentChat
from agentchat.storage.records import RecordStore
from agentchat.types import FileAttachment, MessageKind, MessageRecord, MessageSender, Thumbnail

__all__ = [
    "AgentChat",
    "AgentChatConfig",
    "AssetCache",
    "CacheStats",
    "FileAttachment",
    "MessageKind",
    "MessageRecord",
    "MessageSender",
    "RecordStore",
    "SavedAsset",
    "Thumbnail",
]
