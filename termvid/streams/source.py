"""Raw video source backed by an ffmpeg decoder process.

The decoder converts any video file into a headerless stream of 24-bit
interleaved RGB frames of a fixed size, written back to back to a pipe:

    frame 0: width * height * 3 bytes
    frame 1: width * height * 3 bytes
    ...

Example:
    from termvid.streams import FrameReader, SourceLauncher

    launcher = SourceLauncher()
    with launcher.launch("movie.mp4", rows=40) as source:
        reader = FrameReader(source.stream, source.frame_size)
        frame = reader.read()
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from ..config import settings
from ..exceptions import DecoderLaunchError, SourceError
from .probe import ProbeResult, probe_video

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 3


@dataclass
class RawVideoSource:
    """Stream handle bound to a running decoder's output.

    Attributes:
        stream: Readable byte channel carrying raw RGB frames
        fps: Declared frames per second
        width: Frame width in pixels (resx)
        height: Frame height in pixels (resy)
        process: Decoder process handle, used for liveness polling
        error_log: File collecting the decoder's diagnostics
    """

    stream: BinaryIO
    fps: float
    width: int
    height: int
    process: subprocess.Popen | None = None
    error_log: BinaryIO | None = None

    @property
    def frame_size(self) -> int:
        """Bytes per frame (width * height * 3)."""
        return self.width * self.height * BYTES_PER_PIXEL

    @property
    def frame_interval(self) -> float:
        """Seconds between two frames at the declared rate."""
        return 1.0 / self.fps

    def decoder_errors(self) -> str:
        """Return what the decoder wrote to its error output so far."""
        if self.error_log is None:
            return ""
        try:
            self.error_log.seek(0)
            return self.error_log.read().decode("utf-8", errors="replace").strip()
        except (OSError, ValueError):
            return ""

    def close(self) -> None:
        """Close the pipe and stop the decoder if it is still running."""
        try:
            self.stream.close()
        except OSError:
            pass
        if self.process is not None and self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=1.0)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()
        if self.error_log is not None:
            self.error_log.close()

    def __enter__(self) -> RawVideoSource:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def resolve_resolution(
    native_width: int,
    native_height: int,
    rows: int,
    max_columns: int | None = None,
) -> tuple[int, int]:
    """Compute the decoded frame size for a target row count.

    Each pixel is drawn as two glyphs, which is roughly a square cell in
    common monospace fonts, so the pixel aspect ratio of the source is kept
    as is. If ``max_columns`` is given the width is reduced until two glyphs
    per pixel fit, and the height follows the aspect ratio. Both dimensions
    are clamped to at least one pixel, so with fewer than two columns the
    result is a single pixel that still needs two columns.

    :param native_width: Source width in pixels
    :param native_height: Source height in pixels
    :param rows: Target number of terminal rows
    :param max_columns: Optional terminal column limit
    :return: (width, height) in pixels, each at least 1
    """
    if native_width <= 0 or native_height <= 0:
        raise ValueError(f"invalid source size {native_width}x{native_height}")
    aspect = native_width / native_height

    height = max(1, rows)
    width = max(1, round(height * aspect))

    if max_columns is not None and width * 2 > max_columns:
        width = max(1, max_columns // 2)
        height = max(1, round(width / aspect))

    return width, height


def parse_size(text: str) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` string.

    :raises ValueError: If the text is malformed or a dimension is not positive
    """
    width_text, sep, height_text = text.lower().partition("x")
    if not sep:
        raise ValueError(f"expected WIDTHxHEIGHT, got {text!r}")
    width, height = int(width_text), int(height_text)
    if width <= 0 or height <= 0:
        raise ValueError(f"size must be positive, got {text!r}")
    return width, height


def build_decoder_command(
    path: str | Path,
    width: int,
    height: int,
    fps: float | None = None,
    binary: str | None = None,
) -> list[str]:
    """Build the ffmpeg command line emitting raw RGB frames on stdout.

    :param path: Video file path
    :param width: Output width in pixels
    :param height: Output height in pixels
    :param fps: Optional output frame rate (None = native)
    :param binary: Decoder executable (default: ``settings.FFMPEG_BINARY``)
    :return: Argument list
    """
    cmd = [
        binary or settings.FFMPEG_BINARY,
        "-nostdin",
        "-v",
        "error",
        "-i",
        str(path),
    ]
    if fps is not None:
        cmd += ["-r", repr(float(fps))]
    cmd += [
        "-f",
        "rawvideo",
        "-pix_fmt",
        "rgb24",
        "-s",
        f"{width}x{height}",
        "-an",
        "pipe:1",
    ]
    return cmd


class SourceLauncher:
    """Probes a video file and starts the decoder that feeds the player."""

    def __init__(
        self,
        ffmpeg_binary: str | None = None,
        ffprobe_binary: str | None = None,
    ):
        """
        Initialize the launcher.

        :param ffmpeg_binary: Decoder executable (None = from settings)
        :param ffprobe_binary: Prober executable (None = from settings)
        """
        self.ffmpeg_binary = ffmpeg_binary or settings.FFMPEG_BINARY
        self.ffprobe_binary = ffprobe_binary or settings.FFPROBE_BINARY

    def probe(self, path: str | Path) -> ProbeResult:
        """Query native size and frame rate of a video file."""
        return probe_video(path, binary=self.ffprobe_binary)

    def launch(
        self,
        path: str | Path,
        *,
        size: tuple[int, int] | None = None,
        fps: float | None = None,
        rows: int = 24,
        max_columns: int | None = None,
    ) -> RawVideoSource:
        """
        Start decoding a video file.

        Without an explicit ``size`` the file is probed and the size derived
        from ``rows`` (and ``max_columns``). The probe is skipped only when
        both ``size`` and ``fps`` are given.

        :param path: Video file path
        :param size: Fixed (width, height) output size
        :param fps: Output frame rate override (None = native rate)
        :param rows: Target row count for derived sizes
        :param max_columns: Terminal column limit for derived sizes
        :return: Stream handle for the running decoder
        :raises SourceError: If probing fails or the decoder can not start
        """
        if fps is not None and fps <= 0:
            raise SourceError(f"frame rate must be positive, got {fps}")

        probe = None
        if size is None or fps is None:
            probe = self.probe(path)

        if size is None:
            width, height = resolve_resolution(probe.width, probe.height, rows, max_columns)
        else:
            width, height = size

        out_fps = fps if fps is not None else probe.fps
        logger.info(f"Decoding {path} at {width}x{height} @ {out_fps:.3f} fps")

        cmd = build_decoder_command(path, width, height, fps=fps, binary=self.ffmpeg_binary)
        logger.debug(f"Decoder: {' '.join(cmd)}")
        error_log = tempfile.TemporaryFile()
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=error_log,
            )
        except (OSError, ValueError) as e:
            error_log.close()
            raise DecoderLaunchError(f"could not start decoder {cmd[0]!r}: {e}") from e

        if process.stdout is None:
            process.kill()
            error_log.close()
            raise DecoderLaunchError("decoder output pipe could not be created")

        return RawVideoSource(
            stream=process.stdout,
            fps=out_fps,
            width=width,
            height=height,
            process=process,
            error_log=error_log,
        )


__all__ = [
    "BYTES_PER_PIXEL",
    "RawVideoSource",
    "SourceLauncher",
    "build_decoder_command",
    "parse_size",
    "resolve_resolution",
]
