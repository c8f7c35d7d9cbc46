"""
termvid - Play video files as colored character art in the terminal
"""

from .exceptions import TermvidError, SourceError, ProbeError, DecoderLaunchError
from .streams import FrameReader, ProbeResult, RawVideoSource, SourceLauncher
from .components.ascii import (
    GlyphRenderer,
    Palette,
    PacingScheduler,
    PlaybackStats,
    PlayerConfig,
    SchedulerState,
    TerminalPlayer,
)
from .terminal import TerminalSession

__all__ = [
    # Errors
    "TermvidError",
    "SourceError",
    "ProbeError",
    "DecoderLaunchError",
    # Streams
    "FrameReader",
    "ProbeResult",
    "RawVideoSource",
    "SourceLauncher",
    # Rendering and playback
    "GlyphRenderer",
    "Palette",
    "PacingScheduler",
    "PlaybackStats",
    "PlayerConfig",
    "SchedulerState",
    "TerminalPlayer",
    "TerminalSession",
]

__version__ = "0.1.0"
