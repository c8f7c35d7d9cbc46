"""
Terminal Video Player - Frame-paced character art playback.

Drives a FrameReader and a GlyphRenderer from a single loop that is gated by
wall-clock time: a frame is read and rendered only once the frame interval
has elapsed since the previous one. Late frames are never rendered in a
burst; the loop simply takes the next frame from the pipe.

Example:
    from termvid.components.ascii import TerminalPlayer

    player = TerminalPlayer("video.mp4")
    stats = player.play()
    print(f"{stats.frames_rendered} frames")
"""

from __future__ import annotations

import logging
import subprocess
import sys
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Callable

from ...config import settings
from ...exceptions import DecoderLaunchError
from ...streams import FrameReader, RawVideoSource, SourceLauncher
from ...terminal import TerminalSession, get_terminal_size
from .renderer import DEFAULT_PALETTE, GlyphRenderer, Palette

logger = logging.getLogger(__name__)

# Seconds to wait for a decoder that produced no frames to report its status
DECODER_EXIT_TIMEOUT = 1.0


class SchedulerState(Enum):
    """Pacing state machine."""

    IDLE = "idle"
    READING = "reading"
    RENDERING = "rendering"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    """Why playback stopped."""

    STREAM_END = "stream_end"
    DECODER_EXIT = "decoder_exit"


@dataclass
class PlayerConfig:
    """Tunables for the pacing loop."""

    # Decoder exit detection (some platforms never report end of pipe)
    poll_decoder: bool = True
    liveness_timeout: float = 0.001  # Seconds

    # Idle behavior: 0 = busy poll, otherwise sleep up to this long per idle
    # iteration (never past the next frame deadline)
    idle_sleep: float = 0.0

    @classmethod
    def from_settings(cls) -> PlayerConfig:
        """Build a config from the application settings."""
        return cls(
            poll_decoder=settings.POLL_DECODER,
            liveness_timeout=settings.LIVENESS_TIMEOUT,
            idle_sleep=settings.IDLE_SLEEP,
        )


@dataclass
class PlaybackStats:
    """Summary of a finished playback session."""

    frames_rendered: int
    elapsed_seconds: float
    terminated_by: TerminationReason | None

    @property
    def effective_fps(self) -> float:
        """Rendered frames per wall-clock second."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.frames_rendered / self.elapsed_seconds


class PacingScheduler:
    """
    Wall-clock gated read/render loop.

    Each call to :meth:`step` performs one iteration of the state machine:

    - IDLE: less than one interval since the last frame, no I/O
    - READING: interval crossed, fetch the next frame
    - RENDERING: draw the frame, then check whether the decoder exited
    - TERMINATED: stream ended or decoder exited

    End of stream and decoder exit are checked independently; either one
    terminates playback.
    """

    def __init__(
        self,
        reader: FrameReader,
        renderer: GlyphRenderer,
        output: BinaryIO,
        fps: float,
        *,
        process: subprocess.Popen | None = None,
        config: PlayerConfig | None = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the scheduler.

        :param reader: Frame source
        :param renderer: Frame renderer
        :param output: Binary terminal output stream
        :param fps: Target frames per second
        :param process: Decoder process to poll for liveness (optional)
        :param config: Loop tunables (uses defaults if None)
        :param clock: Monotonic time source in seconds
        :param sleep: Sleep function used when ``idle_sleep`` is set
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.reader = reader
        self.renderer = renderer
        self.output = output
        self.process = process
        self.config = config or PlayerConfig()
        self.interval = 1.0 / fps
        self._clock = clock
        self._sleep = sleep

        self.state = SchedulerState.IDLE
        self.frames_rendered = 0
        self.terminated_by: TerminationReason | None = None
        self._last_frame_time: float | None = None

    def start(self) -> None:
        """Reset the frame timer to now."""
        self._last_frame_time = self._clock()
        self.state = SchedulerState.IDLE

    def step(self) -> SchedulerState:
        """Run one loop iteration and return the resulting state."""
        if self.state == SchedulerState.TERMINATED:
            return self.state
        if self._last_frame_time is None:
            self.start()

        now = self._clock()
        elapsed = now - self._last_frame_time
        if elapsed < self.interval:
            self.state = SchedulerState.IDLE
            if self.config.idle_sleep > 0:
                self._sleep(min(self.config.idle_sleep, self.interval - elapsed))
            return self.state

        self._last_frame_time = now
        self.state = SchedulerState.READING
        frame = self.reader.read()
        if frame is None:
            return self._terminate(TerminationReason.STREAM_END)

        self.state = SchedulerState.RENDERING
        self.renderer.write(frame, self.output)
        self.frames_rendered += 1

        if self._decoder_exited():
            return self._terminate(TerminationReason.DECODER_EXIT)

        self.state = SchedulerState.IDLE
        return self.state

    def run(self) -> PlaybackStats:
        """Loop until playback terminates."""
        self.start()
        started = self._last_frame_time
        while self.step() != SchedulerState.TERMINATED:
            pass
        stats = PlaybackStats(
            frames_rendered=self.frames_rendered,
            elapsed_seconds=self._clock() - started,
            terminated_by=self.terminated_by,
        )
        logger.info(
            f"Playback finished ({stats.terminated_by.value}): "
            f"{stats.frames_rendered} frames in {stats.elapsed_seconds:.2f}s "
            f"({stats.effective_fps:.2f} fps)"
        )
        return stats

    def _decoder_exited(self) -> bool:
        if not self.config.poll_decoder or self.process is None:
            return False
        try:
            self.process.wait(timeout=self.config.liveness_timeout)
        except subprocess.TimeoutExpired:
            return False
        return True

    def _terminate(self, reason: TerminationReason) -> SchedulerState:
        self.state = SchedulerState.TERMINATED
        self.terminated_by = reason
        return self.state


class TerminalPlayer:
    """
    Plays a video file as colored character art in the terminal.

    Ties together the source launcher, frame reader, renderer, pacing
    scheduler and the terminal session that restores the screen on exit.
    """

    def __init__(
        self,
        source: str | Path,
        *,
        palette: Palette = DEFAULT_PALETTE,
        rows: int | None = None,
        size: tuple[int, int] | None = None,
        fps: float | None = None,
        config: PlayerConfig | None = None,
        launcher: SourceLauncher | None = None,
        output: BinaryIO | None = None,
    ):
        """
        Initialize the player.

        :param source: Video file path
        :param palette: Glyphs ordered from dark to bright
        :param rows: Target rows (None = terminal height - 1)
        :param size: Fixed decode size (width, height), overrides ``rows``
        :param fps: Frame rate override (None = native rate)
        :param config: Pacing loop tunables (None = from settings)
        :param launcher: Source launcher (None = default ffmpeg launcher)
        :param output: Binary output stream (None = ``sys.stdout.buffer``)
        """
        self.video_path = Path(source)
        self.palette = palette
        self.rows = rows
        self.size = size
        self.fps = fps
        self.config = config or PlayerConfig.from_settings()
        self.launcher = launcher or SourceLauncher()
        self.output = output

    def play(self) -> PlaybackStats:
        """
        Decode and render the whole video.

        :return: Playback statistics
        :raises SourceError: If the video can not be opened
        """
        output = self.output or sys.stdout.buffer
        columns, lines = get_terminal_size()
        rows = self.rows or max(1, lines - 1)

        with self.launcher.launch(
            self.video_path,
            size=self.size,
            fps=self.fps,
            rows=rows,
            max_columns=columns,
        ) as source:
            reader = FrameReader(source.stream, source.frame_size)
            renderer = GlyphRenderer(source.width, source.height, self.palette)
            scheduler = PacingScheduler(
                reader,
                renderer,
                output,
                source.fps,
                process=source.process,
                config=self.config,
            )
            with TerminalSession(output):
                stats = scheduler.run()
            if stats.frames_rendered == 0:
                self._check_decoder(source)
        return stats

    def _check_decoder(self, source: RawVideoSource) -> None:
        """Raise if the decoder failed before producing a single frame."""
        if source.process is None:
            return
        try:
            returncode = source.process.wait(timeout=DECODER_EXIT_TIMEOUT)
        except subprocess.TimeoutExpired:
            return
        if returncode != 0:
            detail = source.decoder_errors()
            raise DecoderLaunchError(
                f"invalid or unreadable source: {self.video_path}"
                + (f" ({detail})" if detail else "")
            )


__all__ = [
    "PacingScheduler",
    "PlaybackStats",
    "PlayerConfig",
    "SchedulerState",
    "TerminalPlayer",
    "TerminationReason",
]
