"""Video metadata probing via ffprobe.

Queries the native width, height and frame rate of the first video stream
without decoding it. The prober emits a single comma separated line such as
``1920,1080,24000/1001`` which is parsed into a :class:`ProbeResult`.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path

from ..config import settings
from ..exceptions import ProbeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """Native stream properties reported by the prober."""

    width: int
    height: int
    frame_rate: Fraction

    @property
    def fps(self) -> float:
        """Frame rate as a floating point ratio."""
        return float(self.frame_rate)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


def build_probe_command(path: str | Path, binary: str | None = None) -> list[str]:
    """Build the ffprobe command line for the given file.

    :param path: Video file path
    :param binary: Prober executable (default: ``settings.FFPROBE_BINARY``)
    :return: Argument list
    """
    return [
        binary or settings.FFPROBE_BINARY,
        "-v",
        "error",
        "-select_streams",
        "v:0",
        "-show_entries",
        "stream=width,height,r_frame_rate",
        "-of",
        "csv=p=0",
        str(path),
    ]


def parse_rational(text: str) -> Fraction:
    """Parse a ``num/den`` (or plain number) frame rate.

    :raises ValueError: If the text is malformed or not strictly positive
    """
    num, sep, den = text.strip().partition("/")
    rate = Fraction(int(num), int(den)) if sep else Fraction(num)
    if rate <= 0:
        raise ValueError(f"non-positive frame rate: {text!r}")
    return rate


def parse_probe_output(output: str) -> ProbeResult:
    """Parse the prober's comma separated output line.

    Empty tokens (e.g. from a trailing comma) are ignored.

    :param output: Raw prober stdout
    :return: Parsed probe result
    :raises ProbeError: If the line does not hold width, height and rate
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        raise ProbeError("invalid or unreadable source: prober returned no stream data")
    tokens = [token.strip() for token in lines[0].split(",") if token.strip()]
    if len(tokens) < 3:
        raise ProbeError(f"invalid or unreadable source: unexpected probe output {lines[0]!r}")
    try:
        width = int(tokens[0])
        height = int(tokens[1])
        frame_rate = parse_rational(tokens[2])
    except (ValueError, ZeroDivisionError) as e:
        raise ProbeError(f"invalid or unreadable source: {e}") from e
    if width <= 0 or height <= 0:
        raise ProbeError(f"invalid or unreadable source: bad dimensions {width}x{height}")
    return ProbeResult(width=width, height=height, frame_rate=frame_rate)


def probe_video(path: str | Path, binary: str | None = None) -> ProbeResult:
    """Run the prober on a video file.

    :param path: Video file path
    :param binary: Prober executable (default: ``settings.FFPROBE_BINARY``)
    :return: Native width, height and frame rate
    :raises ProbeError: If the prober can not run, exits nonzero or
        produces unusable output
    """
    cmd = build_probe_command(path, binary)
    logger.debug(f"Probing: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        raise ProbeError(f"invalid or unreadable source: {path} ({e})") from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip()
        raise ProbeError(
            f"invalid or unreadable source: {path}" + (f" ({detail})" if detail else "")
        )

    probe = parse_probe_output(result.stdout)
    logger.debug(f"Probed {path}: {probe.width}x{probe.height} @ {probe.frame_rate} fps")
    return probe


__all__ = [
    "ProbeResult",
    "build_probe_command",
    "parse_probe_output",
    "parse_rational",
    "probe_video",
]
