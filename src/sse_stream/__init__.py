"""
SSE Stream

Incremental Server-Sent Events parsing for streaming HTTP responses.

This package provides a push-style parser that accepts text or bytes in
chunks of any size, an async driver for pull-based byte sources, and
iterator helpers for sync and async byte streams.

Example usage:
    >>> from sse_stream import SSEParser, aconsume_response
    >>>
    >>> # Feed chunks by hand
    >>> parser = SSEParser(print)
    >>> parser.feed_bytes(b"event: ping\\ndata: ok\\n\\n")
    >>>
    >>> # Consume a streaming httpx response
    >>> async with client.stream("GET", url) as response:
    ...     await aconsume_response(response, print)
"""

from importlib.metadata import PackageNotFoundError, version

from sse_stream._consume import (
    AsyncIteratorByteSource,
    ResponseByteSource,
    aconsume_response,
    consume_sse_stream,
)
from sse_stream._errors import SSEDecodeError, SSEError
from sse_stream._sse import SSEParser, parse_sse_async, parse_sse_sync
from sse_stream._types import (
    DEFAULT_EVENT_TYPE,
    ByteSource,
    CompletionCallback,
    EventSink,
    ReadResult,
    ServerSentEvent,
)

__all__ = [
    # Types
    "ServerSentEvent",
    "ReadResult",
    "ByteSource",
    "EventSink",
    "CompletionCallback",
    "DEFAULT_EVENT_TYPE",
    # Errors
    "SSEError",
    "SSEDecodeError",
    # Parsing
    "SSEParser",
    "parse_sse_sync",
    "parse_sse_async",
    # Consumption
    "consume_sse_stream",
    "aconsume_response",
    "AsyncIteratorByteSource",
    "ResponseByteSource",
]

# Use importlib.metadata for version (works with installed package)
# Fall back to hard-coded version for editable installs
try:
    __version__ = version("sse-stream")
except PackageNotFoundError:
    __version__ = "0.1.0"
