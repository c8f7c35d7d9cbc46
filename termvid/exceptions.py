"""Exception classes for termvid."""


class TermvidError(Exception):
    """Base exception for termvid errors."""

    pass


class SourceError(TermvidError):
    """Raised when a video source can not be opened for playback."""

    pass


class ProbeError(SourceError):
    """Raised when the prober fails or reports unusable stream metadata."""

    pass


class DecoderLaunchError(SourceError):
    """Raised when the decoder process or its output pipe can not be created."""

    pass
