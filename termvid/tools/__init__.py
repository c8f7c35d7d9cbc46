"""termvid Tools - Command line entry points."""
