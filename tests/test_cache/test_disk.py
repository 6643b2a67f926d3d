"""Tests for the on-disk file tier."""

import pytest

from agentchat.cache.disk import DiskCache
from agentchat.errors.exceptions import FilesystemFailure


class TestDiskCache:
    def test_directory_created_lazily(self, tmp_path):
        directory = tmp_path / "nested" / "cache"
        cache = DiskCache(directory)
        assert not directory.exists()
        assert cache.directory == directory
        assert directory.is_dir()

    def test_write_and_read(self, cache_dir):
        cache = DiskCache(cache_dir)
        path = cache.write("a.jpg", b"data")
        assert path == cache_dir / "a.jpg"
        assert cache.read("a.jpg") == b"data"
        assert cache.exists("a.jpg")

    def test_read_missing_returns_none(self, cache_dir):
        assert DiskCache(cache_dir).read("missing.jpg") is None

    def test_overwrite(self, cache_dir):
        cache = DiskCache(cache_dir)
        cache.write("a.jpg", b"first")
        cache.write("a.jpg", b"second")
        assert cache.read("a.jpg") == b"second"
        assert cache.file_count == 1

    def test_no_temp_files_left(self, cache_dir):
        cache = DiskCache(cache_dir)
        cache.write("a.jpg", b"x")
        assert [p.name for p in cache_dir.iterdir()] == ["a.jpg"]

    def test_counts_and_size(self, cache_dir):
        cache = DiskCache(cache_dir)
        assert cache.file_count == 0
        assert cache.size_mb == 0.0
        cache.write("a.jpg", b"x" * 1000)
        cache.write("b.jpg", b"y" * 1000)
        assert cache.file_count == 2
        assert cache.size_mb > 0

    def test_write_failure_raises_filesystem_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        cache = DiskCache(blocker)
        with pytest.raises(FilesystemFailure):
            cache.write("a.jpg", b"x")
