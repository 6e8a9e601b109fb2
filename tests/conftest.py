"""
Pytest configuration and fixtures for sse-stream tests.

This module provides scripted byte sources and event collectors shared by
the parser and consumer tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from sse_stream import ReadResult, ServerSentEvent

# ============================================================================
# Async backend
# ============================================================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================================================
# Scripted byte source
# ============================================================================


class ScriptedByteSource:
    """
    Byte source that replays a fixed list of chunks.

    A None entry ends the stream early; an Exception entry is raised from
    read(). Every call to read() and release() is recorded in `calls`.
    """

    def __init__(self, chunks: list[bytes | None | BaseException]) -> None:
        self._chunks = list(chunks)
        self._index = 0
        self.calls: list[str] = []
        self.release_count = 0

    async def read(self) -> ReadResult:
        self.calls.append("read")
        if self._index >= len(self._chunks):
            return ReadResult(done=True)
        chunk = self._chunks[self._index]
        self._index += 1
        if isinstance(chunk, BaseException):
            raise chunk
        if chunk is None:
            return ReadResult(done=True)
        return ReadResult(chunk=chunk)

    def release(self) -> None:
        self.calls.append("release")
        self.release_count += 1


@pytest.fixture
def make_source() -> Callable[[list[bytes | None | BaseException]], ScriptedByteSource]:
    """Factory for ScriptedByteSource instances."""
    return ScriptedByteSource


# ============================================================================
# Event collection
# ============================================================================


@pytest.fixture
def events() -> list[ServerSentEvent]:
    """A list to pass as an event sink via events.append."""
    return []
