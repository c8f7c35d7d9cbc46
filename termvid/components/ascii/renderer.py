"""
Glyph Renderer - Convert raw RGB frames to colored character art.

Every pixel becomes a 24-bit foreground color escape followed by a glyph
chosen by perceived brightness (BT.709 luma), drawn twice so a pixel covers
roughly a square cell. The whole frame is assembled in memory and written
with a single call.

Example:
    from termvid.components.ascii import GlyphRenderer, Palette

    renderer = GlyphRenderer(width=80, height=40, palette=Palette.from_string(" .:#@"))
    renderer.write(frame_bytes, sys.stdout.buffer)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

import numpy as np

# ANSI escape codes
ESC = "\033"
CURSOR_HOME = f"{ESC}[H"

# Character sets ordered from dark to bright
ASCII_CHARS_10 = " .:-=+*#%@"
ASCII_CHARS_69 = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

# Named charsets selectable from the command line
CHARSETS = {
    "ascii10": ASCII_CHARS_10,
    "ascii69": ASCII_CHARS_69,
}

# BT.709 luma weights, scaled to integers so that the weights sum to exactly
# LUMA_SCALE and full white maps to exactly 1.0
LUMA_WEIGHTS = np.array([2126, 7152, 722], dtype=np.int64)
LUMA_SCALE = 10000 * 255

GLYPHS_PER_PIXEL = 2


@dataclass(frozen=True)
class Palette:
    """Immutable glyph table ordered from dark to bright."""

    glyphs: tuple[str, ...]

    def __post_init__(self):
        if not self.glyphs:
            raise ValueError("palette needs at least one glyph")

    @classmethod
    def from_string(cls, chars: str) -> Palette:
        """Create a palette with one glyph per character."""
        return cls(tuple(chars))

    def __len__(self) -> int:
        return len(self.glyphs)

    def __getitem__(self, index: int) -> str:
        return self.glyphs[index]

    def indices(self, pixels: np.ndarray) -> np.ndarray:
        """Map RGB pixels to palette indices.

        ``index = floor(luminance * (N - 1))`` clamped to ``[0, N - 1]``,
        evaluated in integer arithmetic.

        :param pixels: uint8 array with a trailing RGB axis of size 3
        :return: int64 array of indices with the RGB axis removed
        """
        weighted = pixels.astype(np.int64) @ LUMA_WEIGHTS
        idx = (weighted * (len(self.glyphs) - 1)) // LUMA_SCALE
        return np.clip(idx, 0, len(self.glyphs) - 1)

    def glyph_for(self, r: int, g: int, b: int) -> str:
        """Return the glyph for a single pixel."""
        idx = int(self.indices(np.array([r, g, b], dtype=np.uint8)))
        return self.glyphs[idx]


DEFAULT_PALETTE = Palette.from_string(ASCII_CHARS_10)


def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Compute BT.709 relative luminance in [0, 1].

    :param pixels: uint8 array with a trailing RGB axis of size 3
    :return: float64 array with the RGB axis removed
    """
    return (pixels.astype(np.int64) @ LUMA_WEIGHTS) / LUMA_SCALE


class GlyphRenderer:
    """
    Batched renderer for fixed-size raw RGB frames.

    Output layout per frame: cursor home, then per pixel
    ``ESC[38;2;R;G;Bm`` plus the glyph twice, and a newline after each row.
    """

    def __init__(self, width: int, height: int, palette: Palette = DEFAULT_PALETTE):
        """
        Initialize the renderer.

        :param width: Frame width in pixels
        :param height: Frame height in pixels
        :param palette: Glyphs ordered from dark to bright
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self.width = width
        self.height = height
        self.palette = palette
        self._cells = [glyph * GLYPHS_PER_PIXEL for glyph in palette.glyphs]

    @property
    def frame_size(self) -> int:
        """Expected bytes per input frame."""
        return self.width * self.height * 3

    def render(self, frame: bytes | bytearray | memoryview) -> bytes:
        """
        Render one frame to a terminal byte sequence.

        :param frame: Raw interleaved RGB bytes, row-major
        :return: UTF-8 encoded escape sequence for the whole frame
        """
        if len(frame) != self.frame_size:
            raise ValueError(f"expected {self.frame_size} bytes, got {len(frame)}")

        pixels = np.frombuffer(frame, dtype=np.uint8).reshape(self.height, self.width, 3)
        indices = self.palette.indices(pixels).tolist()
        cells = self._cells

        out = [CURSOR_HOME]
        for row, row_idx in zip(pixels.tolist(), indices):
            out.extend(
                f"{ESC}[38;2;{r};{g};{b}m{cells[i]}" for (r, g, b), i in zip(row, row_idx)
            )
            out.append("\n")
        return "".join(out).encode("utf-8")

    def write(self, frame: bytes | bytearray | memoryview, output: BinaryIO) -> int:
        """
        Render a frame and emit it with a single write.

        :param frame: Raw interleaved RGB bytes, row-major
        :param output: Binary output stream (e.g. ``sys.stdout.buffer``)
        :return: Number of bytes handed to the stream
        """
        data = self.render(frame)
        output.write(data)
        output.flush()
        return len(data)


__all__ = [
    "ASCII_CHARS_10",
    "ASCII_CHARS_69",
    "CHARSETS",
    "CURSOR_HOME",
    "DEFAULT_PALETTE",
    "GlyphRenderer",
    "Palette",
    "luminance",
]
