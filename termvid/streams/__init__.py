"""termvid streams package.

This package provides the frame source side of playback:

- probe_video: Native size and frame rate via ffprobe
- SourceLauncher: Starts an ffmpeg decoder emitting raw RGB frames
- RawVideoSource: Stream handle bound to the decoder's output pipe
- FrameReader: Reads one complete frame at a time from the pipe

Example:
    from termvid.streams import FrameReader, SourceLauncher

    with SourceLauncher().launch("movie.mp4", rows=40) as source:
        reader = FrameReader(source.stream, source.frame_size)
        while (frame := reader.read()) is not None:
            ...
"""

from .probe import ProbeResult, probe_video, parse_probe_output
from .source import (
    BYTES_PER_PIXEL,
    RawVideoSource,
    SourceLauncher,
    build_decoder_command,
    parse_size,
    resolve_resolution,
)
from .reader import FrameReader

__all__ = [
    "ProbeResult",
    "probe_video",
    "parse_probe_output",
    "BYTES_PER_PIXEL",
    "RawVideoSource",
    "SourceLauncher",
    "build_decoder_command",
    "parse_size",
    "resolve_resolution",
    "FrameReader",
]
