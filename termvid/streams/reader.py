"""Fixed-size frame reader for raw pipe streams.

Pipes deliver data in arbitrary chunk sizes, so a single read rarely returns
a whole frame. FrameReader keeps reading into one reusable buffer until the
frame is complete or the stream closes.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)


class FrameReader:
    """Read exactly one frame's worth of bytes per call.

    The same ``bytearray`` is returned (and overwritten) on every call, so
    consumers must finish with a frame before requesting the next one.

    Example:
        reader = FrameReader(source.stream, source.frame_size)
        while (frame := reader.read()) is not None:
            render(frame)
    """

    def __init__(self, stream: BinaryIO, frame_size: int):
        """
        Initialize the reader.

        :param stream: Readable binary stream (e.g. the decoder's stdout)
        :param frame_size: Bytes per frame
        """
        if frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {frame_size}")
        self.stream = stream
        self.frame_size = frame_size
        self.buffer = bytearray(frame_size)
        self._view = memoryview(self.buffer)
        self._finished = False

    @property
    def finished(self) -> bool:
        """True once the stream signalled its end."""
        return self._finished

    def read(self) -> bytearray | None:
        """Read the next frame.

        Blocks until a full frame is available. Short reads are absorbed.
        A zero-byte read, a closed stream or an I/O error all end the stream;
        an incomplete trailing frame is discarded.

        :return: The frame buffer, or None once the stream has ended
        """
        if self._finished:
            return None

        filled = 0
        while filled < self.frame_size:
            try:
                count = self.stream.readinto(self._view[filled:])
            except (OSError, ValueError) as e:
                logger.debug(f"Stream read failed after {filled} bytes: {e}")
                count = 0
            if not count:
                self._finished = True
                return None
            filled += count

        return self.buffer


__all__ = ["FrameReader"]
