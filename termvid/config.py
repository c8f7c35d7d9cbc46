"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # External tools
    FFMPEG_BINARY: str = "ffmpeg"
    FFPROBE_BINARY: str = "ffprobe"

    # Rendering
    PALETTE: str = " .:-=+*#%@"  # Dark to bright
    ROWS: int | None = None  # None = terminal height - 1

    # Playback loop
    LIVENESS_TIMEOUT: float = 0.001  # Seconds
    POLL_DECODER: bool = True
    IDLE_SLEEP: float = 0.0  # 0 = busy poll

    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "TERMVID_"}


settings = Settings()
