"""Reusable playback components for termvid."""

from .ascii import (
    GlyphRenderer,
    Palette,
    PacingScheduler,
    PlaybackStats,
    PlayerConfig,
    SchedulerState,
    TerminalPlayer,
)

__all__ = [
    "GlyphRenderer",
    "Palette",
    "PacingScheduler",
    "PlaybackStats",
    "PlayerConfig",
    "SchedulerState",
    "TerminalPlayer",
]
