"""Composition root: one AssetCache and one RecordStore per process."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from PIL import Image

from agentchat.cache.fetch import ImageFetcher
from agentchat.cache.manager import AssetCache
from agentchat.config.hierarchy import load_config_hierarchy
from agentchat.config.schema import AgentChatConfig
from agentchat.storage.kv import KeyValueStore, SqliteKeyValueStore
from agentchat.storage.records import RecordStore
from agentchat.types import MessageRecord, MessageSender

logger = logging.getLogger(__name__)


class AgentChat:
    """Owns the asset cache and record store and their lifecycles."""

    def __init__(
        self,
        config: AgentChatConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        kv_store: KeyValueStore | None = None,
    ) -> None:
        self._config = config or AgentChatConfig()

        fetcher = ImageFetcher(
            client=http_client,
            timeout=self._config.fetch_timeout,
            attempts=self._config.fetch_attempts,
            backoff=self._config.fetch_backoff,
        )
        self._assets = AssetCache(
            cache_dir=self._config.cache_dir,
            fetcher=fetcher,
            memory_max_items=self._config.memory_max_items,
            memory_max_mb=self._config.memory_max_mb,
            jpeg_quality=self._config.jpeg_quality,
            thumbnail_quality=self._config.thumbnail_quality,
            thumbnail_size=self._config.thumbnail_size,
        )

        self._kv = kv_store or SqliteKeyValueStore(self._config.store_path)
        self._records = RecordStore(self._kv)

    @classmethod
    def from_config(cls, **overrides: Any) -> AgentChat:
        """Build from the merged config hierarchy plus runtime overrides."""
        return cls(AgentChatConfig.from_mapping(load_config_hierarchy(**overrides)))

    @property
    def config(self) -> AgentChatConfig:
        return self._config

    @property
    def assets(self) -> AssetCache:
        return self._assets

    @property
    def records(self) -> RecordStore:
        return self._records

    def send_image_message(
        self,
        image: Image.Image | bytes,
        caption: str = "",
        sender: MessageSender = MessageSender.USER,
        current: list[MessageRecord] | None = None,
    ) -> list[MessageRecord] | None:
        """Save an image locally and append a file message pointing at it.

        Returns the updated message list, or None if the image was not saved.
        """
        saved = self._assets.save_locally(image)
        if saved is None:
            logger.warning("Image message dropped: image could not be saved")
            return None
        message = MessageRecord.file_message(
            path=saved.path,
            byte_size=saved.byte_size,
            sender=sender,
            caption=caption,
            thumbnail_path=saved.thumbnail_path,
        )
        return self._records.append(message, current=current)

    async def close(self) -> None:
        await self._assets.close()
        self._kv.close()

    async def __aenter__(self) -> AgentChat:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
