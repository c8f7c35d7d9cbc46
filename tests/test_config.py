"""Tests for application settings."""

from termvid.components.ascii import PlayerConfig
from termvid.config import Settings


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self):
        """Test the default settings."""
        settings = Settings()
        assert settings.FFMPEG_BINARY == "ffmpeg"
        assert settings.FFPROBE_BINARY == "ffprobe"
        assert settings.ROWS is None
        assert settings.IDLE_SLEEP == 0.0
        assert settings.POLL_DECODER is True

    def test_environment_override(self, monkeypatch):
        """Test TERMVID_ prefixed variables override settings."""
        monkeypatch.setenv("TERMVID_PALETTE", " .oO@")
        monkeypatch.setenv("TERMVID_ROWS", "40")
        monkeypatch.setenv("TERMVID_IDLE_SLEEP", "0.001")
        settings = Settings()
        assert settings.PALETTE == " .oO@"
        assert settings.ROWS == 40
        assert settings.IDLE_SLEEP == 0.001


class TestPlayerConfig:
    """Tests for PlayerConfig."""

    def test_defaults_busy_poll(self):
        """Test the loop busy-polls and watches the decoder by default."""
        config = PlayerConfig()
        assert config.idle_sleep == 0.0
        assert config.poll_decoder is True
        assert config.liveness_timeout == 0.001

    def test_from_settings(self):
        """Test the config mirrors the application settings."""
        config = PlayerConfig.from_settings()
        assert config.poll_decoder is True
        assert config.idle_sleep == 0.0
