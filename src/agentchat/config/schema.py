"""Pydantic model for the merged runtime configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from agentchat.config import defaults


class AgentChatConfig(BaseModel):
    cache_dir: Path = defaults.DEFAULT_CACHE_DIR
    store_path: Path = defaults.DEFAULT_STORE_PATH
    memory_max_items: int = Field(default=defaults.DEFAULT_MEMORY_MAX_ITEMS, ge=1)
    memory_max_mb: float = Field(default=defaults.DEFAULT_MEMORY_MAX_MB, gt=0)
    jpeg_quality: float = Field(default=defaults.DEFAULT_JPEG_QUALITY, gt=0, le=1)
    thumbnail_quality: float = Field(default=defaults.DEFAULT_THUMBNAIL_QUALITY, gt=0, le=1)
    thumbnail_size: tuple[int, int] = defaults.DEFAULT_THUMBNAIL_SIZE
    fetch_timeout: float = Field(default=defaults.DEFAULT_FETCH_TIMEOUT, gt=0)
    fetch_attempts: int = Field(default=defaults.DEFAULT_FETCH_ATTEMPTS, ge=1)
    fetch_backoff: float = Field(default=defaults.DEFAULT_FETCH_BACKOFF, ge=0)
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    model_config = {"extra": "ignore"}

    @field_validator("cache_dir", "store_path", mode="before")
    @classmethod
    def _expand_user(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Path(value).expanduser()
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> AgentChatConfig:
        """Validate a merged config dict, as returned by ``load_config_hierarchy``."""
        return cls(**data)
