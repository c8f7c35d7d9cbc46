# Terminal Player
"""
Play a video file as colored character art in the terminal.

Usage:
    termvid movie.mp4

    # Fixed row count
    termvid movie.mp4 --rows 40

    # Fixed decode size and frame rate (skips probing)
    termvid movie.mp4 --size 120x50 --fps 24

    # Custom glyphs, dark to bright
    termvid movie.mp4 --palette " .oO@"

    # Finer brightness steps
    termvid movie.mp4 --charset ascii69
"""

from __future__ import annotations

import argparse
import logging
import sys

from termvid.components.ascii import CHARSETS, Palette, PlayerConfig, TerminalPlayer
from termvid.config import settings
from termvid.exceptions import SourceError
from termvid.streams import parse_size

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="termvid",
        description="Play a video file as colored character art in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s movie.mp4                      # Fit to terminal
  %(prog)s movie.mp4 --rows 40            # 40 rows, aspect preserved
  %(prog)s movie.mp4 --size 120x50 --fps 24
""",
    )
    parser.add_argument("path", help="Video file to play")
    parser.add_argument(
        "--rows",
        "-r",
        type=int,
        default=settings.ROWS,
        help="Target rows (default: terminal height - 1)",
    )
    parser.add_argument(
        "--size",
        "-s",
        type=_size_arg,
        default=None,
        help="Fixed decode size as WIDTHxHEIGHT (overrides --rows)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=None,
        help="Frame rate override (default: native rate)",
    )
    parser.add_argument(
        "--palette",
        "-p",
        default=settings.PALETTE,
        help=f"Glyphs from dark to bright (default: {settings.PALETTE!r})",
    )
    parser.add_argument(
        "--charset",
        "-c",
        choices=sorted(CHARSETS),
        default=None,
        help="Named glyph set, overrides --palette",
    )
    parser.add_argument(
        "--idle-sleep",
        type=float,
        default=settings.IDLE_SLEEP,
        help="Seconds to yield while waiting for the next frame (default: busy poll)",
    )
    parser.add_argument(
        "--no-poll",
        action="store_true",
        help="Only stop at end of stream, never on decoder exit",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Log level for stderr output (default: {settings.LOG_LEVEL})",
    )
    return parser


def _size_arg(text: str) -> tuple[int, int]:
    try:
        return parse_size(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.charset is not None:
        args.palette = CHARSETS[args.charset]
    if not args.palette:
        parser.error("palette must contain at least one glyph")
    if args.rows is not None and args.rows <= 0:
        parser.error("--rows must be positive")

    config = PlayerConfig(
        poll_decoder=settings.POLL_DECODER and not args.no_poll,
        liveness_timeout=settings.LIVENESS_TIMEOUT,
        idle_sleep=max(0.0, args.idle_sleep),
    )
    player = TerminalPlayer(
        args.path,
        palette=Palette.from_string(args.palette),
        rows=args.rows,
        size=args.size,
        fps=args.fps,
        config=config,
    )

    try:
        stats = player.play()
    except SourceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Rendered {stats.frames_rendered} frames at {stats.effective_fps:.2f} fps")
    return 0


if __name__ == "__main__":
    sys.exit(main())
