"""Character art rendering and playback components.

This module provides terminal-based video playback:
- GlyphRenderer: Convert raw RGB frames to colored character art
- Palette: Immutable glyph table ordered from dark to bright
- PacingScheduler: Wall-clock gated read/render loop
- TerminalPlayer: Plays a video file in the terminal
"""

from .renderer import (
    ASCII_CHARS_10,
    ASCII_CHARS_69,
    CHARSETS,
    DEFAULT_PALETTE,
    GlyphRenderer,
    Palette,
    luminance,
)
from .player import (
    PacingScheduler,
    PlaybackStats,
    PlayerConfig,
    SchedulerState,
    TerminalPlayer,
    TerminationReason,
)

__all__ = [
    # Renderer
    "ASCII_CHARS_10",
    "ASCII_CHARS_69",
    "CHARSETS",
    "DEFAULT_PALETTE",
    "GlyphRenderer",
    "Palette",
    "luminance",
    # Player
    "PacingScheduler",
    "PlaybackStats",
    "PlayerConfig",
    "SchedulerState",
    "TerminalPlayer",
    "TerminationReason",
]
