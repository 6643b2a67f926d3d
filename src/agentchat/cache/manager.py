"""Asset cache — orchestrates memory, in-flight, disk and network tiers."""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
import uuid
from pathlib import Path
from urllib.parse import unquote, urlsplit

from PIL import Image

from agentchat.cache.disk import DiskCache
from agentchat.cache.fetch import ImageFetcher
from agentchat.cache.keys import (
    basename_of,
    disk_filename,
    is_remote_locator,
    primary_filename,
    thumbnail_filename,
)
from agentchat.cache.memory import MemoryCache
from agentchat.cache.stats import CacheEntry, CacheOrigin, CacheStats, SavedAsset
from agentchat.errors.exceptions import (
    DecodeFailure,
    FilesystemFailure,
    NetworkFailure,
)
from agentchat.utils.image import (
    compress_image,
    decode_image,
    estimate_size,
    generate_thumbnail,
    open_image,
)

logger = logging.getLogger(__name__)


class AssetCache:
    """Resolves image keys (URLs or local paths) with single-flight fetching.

    Remote keys go memory -> in-flight registry -> disk -> network. Local
    keys go through :meth:`local_resolve`. Images saved with
    :meth:`save_locally` are kept in a recently-saved index so they can be
    read back without touching the filesystem.

    The memory tier, the recently-saved index and the in-flight registry each
    have their own lock, held only around dict operations.
    """

    def __init__(
        self,
        cache_dir: Path,
        fetcher: ImageFetcher | None = None,
        memory_max_items: int = 100,
        memory_max_mb: float = 50,
        jpeg_quality: float = 0.7,
        thumbnail_quality: float = 0.8,
        thumbnail_size: tuple[int, int] = (150, 150),
    ) -> None:
        self._memory = MemoryCache(max_items=memory_max_items, max_size_mb=memory_max_mb)
        self._disk = DiskCache(cache_dir)
        self._fetcher = fetcher or ImageFetcher()
        self._jpeg_quality = jpeg_quality
        self._thumbnail_quality = thumbnail_quality
        self._thumbnail_size = thumbnail_size

        self._recent: dict[str, Image.Image] = {}
        self._recent_lock = threading.Lock()

        self._in_flight: dict[str, asyncio.Task[Image.Image | None]] = {}
        self._in_flight_lock = threading.Lock()

        self._stats = CacheStats()

    @property
    def cache_dir(self) -> Path:
        return self._disk.directory

    # ── Resolution ──

    async def resolve(self, key: str) -> Image.Image | None:
        """Resolve ``key`` to a decoded image, or None on any failure."""
        entry = self._memory.get(key)
        if entry is not None:
            self._stats.memory_hits += 1
            return entry.payload

        if not is_remote_locator(key):
            image = await asyncio.to_thread(self.local_resolve, key)
            if image is None:
                self._stats.misses += 1
            return image

        task = self._join_or_start(key)
        try:
            # Shielded: a waiter giving up must not cancel the shared fetch
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.debug("Resolution of %s abandoned by caller", key)
            raise

    def is_pending(self, key: str) -> bool:
        with self._in_flight_lock:
            return key in self._in_flight

    def _join_or_start(self, key: str) -> asyncio.Task[Image.Image | None]:
        with self._in_flight_lock:
            task = self._in_flight.get(key)
            if task is not None:
                self._stats.joined_fetches += 1
                return task
            task = asyncio.get_running_loop().create_task(self._resolve_remote(key))
            self._in_flight[key] = task
        task.add_done_callback(functools.partial(self._release, key))
        return task

    def _release(self, key: str, task: asyncio.Task[Image.Image | None]) -> None:
        with self._in_flight_lock:
            if self._in_flight.get(key) is task:
                del self._in_flight[key]

    async def _resolve_remote(self, key: str) -> Image.Image | None:
        filename = disk_filename(key)

        try:
            data = await asyncio.to_thread(self._disk.read, filename)
        except FilesystemFailure as e:
            logger.warning("Disk tier unreadable for %s: %s", key, e.message)
            data = None
        if data is not None:
            try:
                image = decode_image(data, source=key)
            except DecodeFailure:
                logger.warning("Discarding undecodable disk entry for %s", key)
            else:
                self._stats.disk_hits += 1
                self._remember(key, image, CacheOrigin.DISK)
                return image

        self._stats.misses += 1
        self._stats.network_fetches += 1
        try:
            data = await self._fetcher.fetch(key)
            image = decode_image(data, source=key)
        except NetworkFailure as e:
            logger.warning("Failed to load image %s: %s", key, e.message)
            return None
        except DecodeFailure as e:
            logger.warning("Failed to decode image %s: %s", key, e.message)
            return None
        except Exception:
            logger.exception("Unexpected error loading image %s", key)
            return None

        self._remember(key, image, CacheOrigin.NETWORK)
        try:
            await asyncio.to_thread(self._disk.write, filename, data)
        except FilesystemFailure as e:
            logger.warning("Could not persist %s to disk tier: %s", key, e.message)
        return image

    def _remember(self, key: str, image: Image.Image, origin: CacheOrigin) -> None:
        self._memory.set(
            key,
            CacheEntry(key=key, payload=image, origin=origin, size_bytes=estimate_size(image)),
        )

    # ── Local files ──

    def local_resolve(self, path: str) -> Image.Image | None:
        """Load a local image, trying progressively looser strategies.

        Order: recently-saved index, direct open, raw read + decode, then the
        file's basename inside the cache directory. Any success is recorded
        in the recently-saved index under ``path``.
        """
        image = self._recent_get(path)
        if image is not None:
            return image

        for strategy in (self._open_direct, self._read_and_decode, self._open_from_cache_dir):
            image = strategy(path)
            if image is not None:
                self._recent_put(path, image)
                return image

        logger.info("Could not load image from: %s", path)
        return None

    def _open_direct(self, path: str) -> Image.Image | None:
        try:
            return open_image(path)
        except (OSError, ValueError, DecodeFailure) as e:
            logger.debug("Direct open failed for %s: %s", path, e)
            return None

    def _read_and_decode(self, path: str) -> Image.Image | None:
        file_path = _as_filesystem_path(path)
        try:
            return decode_image(file_path.read_bytes(), source=path)
        except (OSError, ValueError, DecodeFailure) as e:
            logger.debug("Read-and-decode failed for %s: %s", path, e)
            return None

    def _open_from_cache_dir(self, path: str) -> Image.Image | None:
        name = basename_of(path)
        if not name:
            return None
        try:
            return open_image(self._disk.directory / name)
        except (OSError, ValueError, DecodeFailure):
            return None

    def _recent_get(self, path: str) -> Image.Image | None:
        with self._recent_lock:
            return self._recent.get(path)

    def _recent_put(self, path: str, image: Image.Image) -> None:
        with self._recent_lock:
            self._recent[path] = image

    # ── Saving ──

    def save_locally(
        self,
        image: Image.Image | bytes,
        filename_hint: str | None = None,
    ) -> SavedAsset | None:
        """Compress ``image`` into the cache directory and derive a thumbnail.

        Returns None if the primary image cannot be encoded or written. A
        thumbnail failure only leaves ``thumbnail_path`` unset.
        """
        if isinstance(image, bytes):
            try:
                image = decode_image(image, source="save_locally")
            except DecodeFailure as e:
                logger.error("Failed to save image: %s", e.message)
                return None

        name = Path(filename_hint).name if filename_hint else uuid.uuid4().hex
        try:
            data = compress_image(image, self._jpeg_quality)
        except DecodeFailure as e:
            logger.error("Failed to compress image: %s", e.message)
            return None
        try:
            saved_path = str(self._disk.write(primary_filename(name), data))
        except FilesystemFailure as e:
            logger.error("Failed to save image: %s", e.message)
            return None

        self._recent_put(saved_path, image)
        thumbnail_path = self._save_thumbnail(name, image)

        logger.info("Image saved: %s", saved_path)
        return SavedAsset(path=saved_path, byte_size=len(data), thumbnail_path=thumbnail_path)

    def _save_thumbnail(self, name: str, image: Image.Image) -> str | None:
        try:
            thumbnail = generate_thumbnail(image, self._thumbnail_size)
            data = compress_image(thumbnail, self._thumbnail_quality)
            path = str(self._disk.write(thumbnail_filename(name), data))
        except (DecodeFailure, FilesystemFailure) as e:
            logger.warning("Thumbnail not saved for %s: %s", name, e.message)
            return None
        self._recent_put(path, thumbnail)
        logger.info("Thumbnail saved: %s", path)
        return path

    # ── Housekeeping ──

    def clear(self) -> None:
        """Drop the memory tier and recently-saved index. Disk files stay."""
        self._memory.clear()
        with self._recent_lock:
            self._recent.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        with self._recent_lock:
            recent = len(self._recent)
        return CacheStats(
            memory_entries=len(self._memory),
            memory_size_mb=self._memory.size_mb,
            recent_entries=recent,
            disk_files=self._disk.file_count,
            disk_size_mb=self._disk.size_mb,
            memory_hits=self._stats.memory_hits,
            disk_hits=self._stats.disk_hits,
            network_fetches=self._stats.network_fetches,
            joined_fetches=self._stats.joined_fetches,
            misses=self._stats.misses,
        )

    async def close(self) -> None:
        await self._fetcher.close()

    async def __aenter__(self) -> AssetCache:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


def _as_filesystem_path(path: str) -> Path:
    if path.startswith("file://"):
        return Path(unquote(urlsplit(path).path))
    return Path(path)
