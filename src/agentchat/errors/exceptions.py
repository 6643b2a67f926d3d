"""Custom exception hierarchy for agentchat."""

from __future__ import annotations

from typing import Any


class AgentChatError(Exception):
    """Base exception for all agentchat errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class NetworkFailure(AgentChatError):
    """Remote fetch failed — transport error or non-success status.

    Transient failures (connection error, timeout, 5xx) are retried inside a
    single fetch attempt; everything else fails the attempt immediately.
    """

    def __init__(
        self,
        message: str = "",
        url: str = "",
        http_status: int | None = None,
        transient: bool = False,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.http_status = http_status
        self.transient = transient
        self.original = original


class DecodeFailure(AgentChatError):
    """Bytes are not a decodable image, or an image could not be encoded."""

    def __init__(self, message: str = "", source: str = "") -> None:
        super().__init__(message)
        self.source = source


class FilesystemFailure(AgentChatError):
    """Reading or writing a cache file failed."""

    def __init__(
        self,
        message: str = "",
        path: str = "",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original = original


class SerializationFailure(AgentChatError):
    """The message collection could not be encoded or decoded."""

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original
