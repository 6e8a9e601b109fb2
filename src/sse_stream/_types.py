"""
Core types for the SSE stream parser.

This module defines the event value handed to callers and the structural
types used to plug in byte sources and event sinks.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

# Protocol constants
DEFAULT_EVENT_TYPE = "message"
SSE_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class ServerSentEvent:
    """
    A single event dispatched by a blank line in the event stream.

    Attributes:
        event: The event type ("message" when no `event:` field was sent)
        data: All `data:` lines of the block joined with "\\n"
        id: The last `id:` field of the block, if any
        retry: The last valid `retry:` field of the block, if any
    """

    event: str = DEFAULT_EVENT_TYPE
    data: str = ""
    id: str | None = None
    retry: int | None = None

    def json(self) -> Any:
        """Decode the event data as JSON."""
        return json.loads(self.data)


@dataclass(frozen=True, slots=True)
class ReadResult:
    """
    Result of one ByteSource.read() call.

    Attributes:
        chunk: The bytes read (may be None or empty)
        done: True once the source has no more data
    """

    chunk: bytes | None = None
    done: bool = False


@runtime_checkable
class ByteSource(Protocol):
    """
    Pull-based byte source consumed by consume_sse_stream().

    Sources may additionally expose a `release()` method (sync or async),
    which is called exactly once when consumption ends.
    """

    async def read(self) -> ReadResult: ...


# Sink invoked once per completed event block
EventSink = Callable[[ServerSentEvent], None]

# Completion callback - may be a plain function or a coroutine function
CompletionCallback = Callable[[], Awaitable[None] | None]
