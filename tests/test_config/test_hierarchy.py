"""Tests for config hierarchy."""

import pytest

from agentchat.config import hierarchy
from agentchat.config.hierarchy import (
    _coerce_env_value,
    _load_yaml_config,
    load_config_hierarchy,
)


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep the user's real config files and env out of these tests."""
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.chdir(tmp_path)
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["memory_max_items"] == 100
        assert config["memory_max_mb"] == 50.0
        assert config["thumbnail_size"] == [150, 150]

    def test_runtime_overrides(self):
        config = load_config_hierarchy(memory_max_items=5, cache_dir="/tmp/x")
        assert config["memory_max_items"] == 5
        assert config["cache_dir"] == "/tmp/x"

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(memory_max_items=None)
        assert config["memory_max_items"] == 100

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("AGENTCHAT_CACHE_DIR", "/data/images")
        assert load_config_hierarchy()["cache_dir"] == "/data/images"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("AGENTCHAT_FETCH_ATTEMPTS", "7")
        assert load_config_hierarchy(fetch_attempts=2)["fetch_attempts"] == 2

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("AGENTCHAT_MEMORY_MAX_ITEMS", "10")
        config = load_config_hierarchy()
        assert config["memory_max_items"] == 10
        assert isinstance(config["memory_max_items"], int)

    def test_env_thumbnail_size(self, monkeypatch):
        monkeypatch.setenv("AGENTCHAT_THUMBNAIL_SIZE", "200x100")
        assert load_config_hierarchy()["thumbnail_size"] == [200, 100]

    def test_project_config(self, tmp_path):
        (tmp_path / "agentchat.yaml").write_text("memory_max_items: 8\njpeg_quality: 0.5\n")
        config = load_config_hierarchy()
        assert config["memory_max_items"] == 8
        assert config["jpeg_quality"] == 0.5

    def test_project_config_found_upward(self, tmp_path, monkeypatch):
        (tmp_path / "agentchat.yaml").write_text("memory_max_items: 3\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config_hierarchy()["memory_max_items"] == 3

    def test_global_config(self, tmp_path):
        global_path = tmp_path / "global" / "config.yaml"
        global_path.parent.mkdir()
        global_path.write_text("fetch_timeout: 5\n")
        assert load_config_hierarchy()["fetch_timeout"] == 5

    def test_env_beats_project(self, tmp_path, monkeypatch):
        (tmp_path / "agentchat.yaml").write_text("memory_max_items: 8\n")
        monkeypatch.setenv("AGENTCHAT_MEMORY_MAX_ITEMS", "9")
        assert load_config_hierarchy()["memory_max_items"] == 9


class TestLoadYamlConfig:
    def test_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "missing.yaml") is None

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_invalid_yaml_ignored(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_float(self):
        assert _coerce_env_value("memory_max_mb", "12.5") == 12.5

    def test_bad_number_left_as_string(self):
        assert _coerce_env_value("memory_max_items", "many") == "many"

    def test_plain_string(self):
        assert _coerce_env_value("log_level", "debug") == "debug"

    def test_thumbnail_comma_separated(self):
        assert _coerce_env_value("thumbnail_size", "64,64") == [64, 64]
