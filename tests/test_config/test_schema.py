"""Tests for the validated runtime config."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from agentchat.config.defaults import get_defaults
from agentchat.config.schema import AgentChatConfig


class TestAgentChatConfig:
    def test_defaults_validate(self):
        config = AgentChatConfig.from_mapping(get_defaults())
        assert config.memory_max_items == 100
        assert config.thumbnail_size == (150, 150)
        assert config.jpeg_quality == 0.7
        assert config.thumbnail_quality == 0.8
        assert config.cache_dir.name == "ImageCache"

    def test_paths_expanded(self):
        config = AgentChatConfig(cache_dir="~/images")
        assert config.cache_dir == Path.home() / "images"

    def test_log_level_uppercased(self):
        assert AgentChatConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_keys_ignored(self):
        config = AgentChatConfig.from_mapping({"something_else": 1})
        assert not hasattr(config, "something_else")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("memory_max_items", 0),
            ("jpeg_quality", 1.5),
            ("fetch_attempts", 0),
            ("fetch_backoff", -1),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            AgentChatConfig(**{field: value})
