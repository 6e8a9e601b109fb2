"""
Driving an SSEParser from a pull-based byte source.

consume_sse_stream() reads chunks until the source reports the end of data,
then always finishes the parser and releases the source, even when a read
fails. The adapters below turn async byte iterators and streaming httpx
responses into byte sources.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx

from sse_stream._sse import SSEParser
from sse_stream._types import (
    ByteSource,
    CompletionCallback,
    EventSink,
    ReadResult,
)


async def _maybe_await(result: Any) -> None:
    # Check if result is awaitable
    if hasattr(result, "__await__"):
        await result


async def consume_sse_stream(
    source: ByteSource,
    on_event: EventSink,
    on_complete: CompletionCallback | None = None,
) -> None:
    """
    Consume a byte source and emit SSE events via on_event.

    Args:
        source: Byte source to read from until it reports done
        on_event: Called once per completed event
        on_complete: Optional callback run after the source is released

    Raises:
        Any error raised by source.read(), after cleanup has run
    """
    parser = SSEParser(on_event)
    try:
        while True:
            result = await source.read()
            if result.done:
                break
            if result.chunk:
                parser.feed_bytes(result.chunk)
    finally:
        parser.finish()
        release = getattr(source, "release", None)
        if release is not None:
            await _maybe_await(release())
        if on_complete is not None:
            await _maybe_await(on_complete())


class AsyncIteratorByteSource:
    """
    Byte source backed by an async iterator of bytes.

    Example:
        >>> source = AsyncIteratorByteSource(response.aiter_bytes())
        >>> await consume_sse_stream(source, print)
    """

    def __init__(self, iterator: AsyncIterator[bytes]) -> None:
        self._iterator = iterator
        self._released = False

    async def read(self) -> ReadResult:
        if self._released:
            return ReadResult(done=True)
        try:
            chunk = await anext(self._iterator)
        except StopAsyncIteration:
            return ReadResult(done=True)
        return ReadResult(chunk=chunk)

    async def release(self) -> None:
        """Close the underlying iterator. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is not None:
            await aclose()


class ResponseByteSource(AsyncIteratorByteSource):
    """
    Byte source backed by a streaming httpx.Response.

    The response must have been opened with stream=True (for example via
    AsyncClient.stream() or AsyncClient.send(request, stream=True)).
    Releasing the source closes the response.
    """

    def __init__(
        self,
        response: httpx.Response,
        *,
        chunk_size: int | None = None,
    ) -> None:
        super().__init__(response.aiter_bytes(chunk_size))
        self._response = response

    @property
    def response(self) -> httpx.Response:
        return self._response

    async def release(self) -> None:
        """Close the iterator and the response. Safe to call more than once."""
        if self._released:
            return
        try:
            await super().release()
        finally:
            await self._response.aclose()


async def aconsume_response(
    response: httpx.Response,
    on_event: EventSink,
    on_complete: CompletionCallback | None = None,
    *,
    chunk_size: int | None = None,
) -> None:
    """
    Consume a streaming httpx.Response as an event stream.

    The response is closed when consumption ends.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     async with client.stream("GET", url) as response:
        ...         await aconsume_response(response, print)
    """
    source = ResponseByteSource(response, chunk_size=chunk_size)
    await consume_sse_stream(source, on_event, on_complete)
