"""
Pytest fixtures for termvid tests
"""

import io

import pytest


class ChunkedStream(io.RawIOBase):
    """Readable stream that hands out data in predefined chunk sizes."""

    def __init__(self, data: bytes, chunk_sizes: list[int]):
        self._data = data
        self._pos = 0
        self._chunks = list(chunk_sizes)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._pos >= len(self._data):
            return 0
        limit = self._chunks.pop(0) if self._chunks else len(self._data)
        count = min(limit, len(buffer), len(self._data) - self._pos)
        buffer[:count] = self._data[self._pos : self._pos + count]
        self._pos += count
        return count


class FakeClock:
    """Manually advanced clock, optionally ticking on every read."""

    def __init__(self, start: float = 0.0, tick: float = 0.0):
        self.now = start
        self.tick = tick

    def __call__(self) -> float:
        value = self.now
        self.now += self.tick
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingOutput(io.BytesIO):
    """BytesIO that records how often write() is called."""

    def __init__(self):
        super().__init__()
        self.write_calls = 0

    def write(self, data) -> int:
        self.write_calls += 1
        return super().write(data)


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock starting at zero."""
    return FakeClock()


@pytest.fixture
def counting_output() -> CountingOutput:
    """Output stream counting write calls."""
    return CountingOutput()


@pytest.fixture
def chunked_stream():
    """Factory for streams delivering data in given chunk sizes."""
    return ChunkedStream
