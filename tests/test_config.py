"""Tests for configuration dataclasses."""

import pytest
from dataclasses import FrozenInstanceError

from config import CodecConfig, Config, DEFAULT_CONFIG, OutputConfig, PreviewConfig


class TestCodecConfig:
    """Tests for CodecConfig dataclass."""

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = CodecConfig()
        assert config.json_indent is None
        assert config.ensure_ascii is False
        assert config.allow_non_finite is False
        assert config.msg_use_bin_type is True

    def test_frozen_immutability(self):
        """Test that frozen dataclass cannot be modified."""
        config = CodecConfig()
        with pytest.raises(FrozenInstanceError):
            config.json_indent = 4

    def test_invalid_indent_raises(self):
        """Test that a negative indent raises ValueError."""
        with pytest.raises(ValueError, match="json_indent"):
            CodecConfig(json_indent=-2)


class TestOutputConfig:
    """Tests for OutputConfig dataclass."""

    def test_default_values(self):
        """Test default output configuration."""
        config = OutputConfig()
        assert config.default_format == "msg"
        assert config.atomic_write is True

    @pytest.mark.parametrize("fmt", ["json", "jsonc", "msg"])
    def test_valid_formats(self, fmt):
        """Test that every payload format is accepted."""
        assert OutputConfig(default_format=fmt).default_format == fmt

    def test_invalid_format_raises(self):
        """Test that an unknown format raises ValueError."""
        with pytest.raises(ValueError, match="Invalid default_format"):
            OutputConfig(default_format="yaml")


class TestPreviewConfig:
    """Tests for PreviewConfig dataclass."""

    def test_default_values(self):
        """Test default preview configuration."""
        config = PreviewConfig()
        assert config.dpi == 150
        assert config.max_panels == 12
        assert config.point_size == 8.0


class TestConfig:
    """Tests for master Config class."""

    def test_default_initialization(self):
        """Test that Config creates all sub-configs with defaults."""
        config = Config()
        assert isinstance(config.codec, CodecConfig)
        assert isinstance(config.output, OutputConfig)
        assert isinstance(config.preview, PreviewConfig)

    def test_custom_sub_configs(self):
        """Test that custom sub-configs are used."""
        config = Config(codec=CodecConfig(json_indent=2))
        assert config.codec.json_indent == 2
        assert config.output == OutputConfig()

    def test_default_config_instance(self):
        """Test the shared default instance."""
        assert DEFAULT_CONFIG == Config()
