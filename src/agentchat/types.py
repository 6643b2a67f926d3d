"""Shared Pydantic models for agentchat messages."""

from __future__ import annotations

import time
import uuid
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class MessageKind(StrEnum):
    TEXT = "text"
    FILE = "file"


class MessageSender(StrEnum):
    USER = "user"
    AGENT = "agent"


# ── Message models ──
#
# Field aliases are the wire names used by the persisted blob; attribute
# names are accepted on input as well.


class Thumbnail(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str


class FileAttachment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    byte_size: int = Field(default=0, ge=0, alias="fileSize")
    thumbnail: Thumbnail | None = None

    @property
    def thumbnail_path(self) -> str | None:
        return self.thumbnail.path if self.thumbnail else None

    @property
    def formatted_size(self) -> str:
        """Human readable size using decimal file units, e.g. ``2.3 MB``."""
        return format_byte_count(self.byte_size)


class MessageRecord(BaseModel):
    """A single chat message as persisted by the record store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    text: str = Field(default="", alias="message")
    kind: MessageKind = Field(default=MessageKind.TEXT, alias="type")
    file: FileAttachment | None = None
    sender: MessageSender
    timestamp_millis: int = Field(alias="timestamp")

    @property
    def is_text(self) -> bool:
        return self.kind == MessageKind.TEXT

    @property
    def is_from_user(self) -> bool:
        return self.sender == MessageSender.USER

    @property
    def sent_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_millis / 1000.0, tz=UTC)

    @classmethod
    def text_message(cls, content: str, sender: MessageSender) -> MessageRecord:
        """Create a text message stamped with a fresh id and the current time."""
        return cls(
            id=_new_id(),
            text=content,
            kind=MessageKind.TEXT,
            sender=sender,
            timestamp_millis=now_millis(),
        )

    @classmethod
    def file_message(
        cls,
        path: str,
        byte_size: int,
        sender: MessageSender,
        caption: str = "",
        thumbnail_path: str | None = None,
    ) -> MessageRecord:
        """Create a file message pointing at a saved asset."""
        thumbnail = Thumbnail(path=thumbnail_path) if thumbnail_path else None
        return cls(
            id=_new_id(),
            text=caption,
            kind=MessageKind.FILE,
            file=FileAttachment(path=path, byte_size=byte_size, thumbnail=thumbnail),
            sender=sender,
            timestamp_millis=now_millis(),
        )


def sort_by_timestamp(records: list[MessageRecord]) -> list[MessageRecord]:
    """Return records ordered oldest first. Stable for equal timestamps."""
    return sorted(records, key=lambda r: r.timestamp_millis)


def now_millis() -> int:
    return int(time.time() * 1000)


def format_byte_count(byte_count: int) -> str:
    if byte_count < 1000 * 1000:
        return f"{round(byte_count / 1000)} KB"
    if byte_count < 1000 * 1000 * 1000:
        return f"{byte_count / (1000 * 1000):.1f} MB"
    return f"{byte_count / (1000 * 1000 * 1000):.1f} GB"


def _new_id() -> str:
    return str(uuid.uuid4()).upper()
