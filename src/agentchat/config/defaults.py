"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default locations
DEFAULT_HOME_DIR = Path.home() / ".agentchat"
DEFAULT_CACHE_DIR = DEFAULT_HOME_DIR / "ImageCache"
DEFAULT_STORE_PATH = DEFAULT_HOME_DIR / "store.db"

# Default memory tier limits
DEFAULT_MEMORY_MAX_ITEMS = 100
DEFAULT_MEMORY_MAX_MB = 50.0

# Default image encoding settings
DEFAULT_JPEG_QUALITY = 0.7
DEFAULT_THUMBNAIL_QUALITY = 0.8
DEFAULT_THUMBNAIL_SIZE = (150, 150)

# Default fetch settings
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_FETCH_ATTEMPTS = 3
DEFAULT_FETCH_BACKOFF = 0.5

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_dir": str(DEFAULT_CACHE_DIR),
        "store_path": str(DEFAULT_STORE_PATH),
        "memory_max_items": DEFAULT_MEMORY_MAX_ITEMS,
        "memory_max_mb": DEFAULT_MEMORY_MAX_MB,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "thumbnail_quality": DEFAULT_THUMBNAIL_QUALITY,
        "thumbnail_size": list(DEFAULT_THUMBNAIL_SIZE),
        "fetch_timeout": DEFAULT_FETCH_TIMEOUT,
        "fetch_attempts": DEFAULT_FETCH_ATTEMPTS,
        "fetch_backoff": DEFAULT_FETCH_BACKOFF,
        "log_level": DEFAULT_LOG_LEVEL,
    }
