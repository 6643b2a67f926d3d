"""Cache key classification and stable disk filename derivation."""

from __future__ import annotations

import hashlib
from urllib.parse import unquote, urlsplit

# Schemes resolved over the network. Everything else is a local path.
REMOTE_SCHEMES: tuple[str, ...] = ("http", "https")

PRIMARY_SUFFIX = ".jpg"
THUMBNAIL_SUFFIX = "_thumb.jpg"
NETWORK_SUFFIX = ".img"

_DISK_NAME_LENGTH = 32


def is_remote_locator(key: str) -> bool:
    """True if ``key`` is a URL with a recognized scheme and a host."""
    try:
        parts = urlsplit(key.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in REMOTE_SCHEMES and bool(parts.netloc)


def hash_key(key: str) -> str:
    """SHA256 hex digest of a request key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def disk_filename(key: str) -> str:
    """Stable on-disk filename for a network-cached key."""
    return hash_key(key)[:_DISK_NAME_LENGTH] + NETWORK_SUFFIX


def primary_filename(name: str) -> str:
    return f"{name}{PRIMARY_SUFFIX}"


def thumbnail_filename(name: str) -> str:
    return f"{name}{THUMBNAIL_SUFFIX}"


def basename_of(path: str) -> str:
    """Last path segment of ``path``, percent-decoded."""
    segment = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return unquote(segment)
