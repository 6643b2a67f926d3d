"""Asset cache — memory + disk tiers with single-flight network fetches."""

from agentchat.cache.fetch import ImageFetcher
from agentchat.cache.keys import disk_filename, hash_key, is_remote_locator
from agentchat.cache.manager import AssetCache
from agentchat.cache.stats import CacheEntry, CacheOrigin, CacheStats, SavedAsset

__all__ = [
    "AssetCache",
    "CacheEntry",
    "CacheOrigin",
    "CacheStats",
    "ImageFetcher",
    "SavedAsset",
    "disk_filename",
    "hash_key",
    "is_remote_locator",
]
