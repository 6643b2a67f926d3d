"""Disk tier: a flat directory of cached image files."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from agentchat.errors.exceptions import FilesystemFailure

logger = logging.getLogger(__name__)


class DiskCache:
    """Append/overwrite-only file store rooted at one directory.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so readers never see a partial file. Nothing is ever
    evicted from this tier.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        return self._directory

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        return (self._directory / filename).is_file()

    def read(self, filename: str) -> bytes | None:
        """Return the file's bytes, or None if it is absent."""
        path = self._directory / filename
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FilesystemFailure(f"Failed to read {path}: {e}", path=str(path), original=e) from e

    def write(self, filename: str, data: bytes) -> Path:
        """Atomically write ``data`` and return the final path."""
        target = self._directory / filename
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp-", suffix=target.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise FilesystemFailure(
                f"Failed to write {target}: {e}", path=str(target), original=e
            ) from e
        logger.debug("Wrote %d bytes to %s", len(data), target)
        return target

    @property
    def file_count(self) -> int:
        return sum(1 for _ in self._files())

    @property
    def size_mb(self) -> float:
        return sum(p.stat().st_size for p in self._files()) / (1024 * 1024)

    def _files(self) -> list[Path]:
        if not self._directory.is_dir():
            return []
        return [p for p in self._directory.iterdir() if p.is_file() and not p.name.startswith(".tmp-")]
