"""Cache entry, saved asset and statistics models."""

from __future__ import annotations

import time
from enum import StrEnum

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field


class CacheOrigin(StrEnum):
    MEMORY = "memory"
    DISK = "disk"
    NETWORK = "network"
    LOCAL_SAVE = "local_save"


class CacheEntry(BaseModel):
    """A decoded image held by the memory tier."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str
    payload: Image.Image
    origin: CacheOrigin = CacheOrigin.NETWORK
    size_bytes: int = 0
    created_at: float = Field(default_factory=time.time)


class SavedAsset(BaseModel):
    """Result of persisting a locally produced image."""

    model_config = ConfigDict(frozen=True)

    path: str
    byte_size: int = Field(ge=0)
    thumbnail_path: str | None = None


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    memory_entries: int = 0
    memory_size_mb: float = 0.0
    recent_entries: int = 0
    disk_files: int = 0
    disk_size_mb: float = 0.0
    memory_hits: int = 0
    disk_hits: int = 0
    network_fetches: int = 0
    joined_fetches: int = 0
    misses: int = 0

    @property
    def hits(self) -> int:
        return self.memory_hits + self.disk_hits

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
