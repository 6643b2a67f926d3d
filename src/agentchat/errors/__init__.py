"""Error taxonomy — failures are logged and degraded, never raised to callers."""

from agentchat.errors.exceptions import (
    AgentChatError,
    DecodeFailure,
    FilesystemFailure,
    NetworkFailure,
    SerializationFailure,
)

__all__ = [
    "AgentChatError",
    "NetworkFailure",
    "DecodeFailure",
    "FilesystemFailure",
    "SerializationFailure",
]
