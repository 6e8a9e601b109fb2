"""
Incremental Server-Sent Events (SSE) parsing.

This module handles parsing of event streams according to the wire format:
- `event:` sets the event type (defaults to "message")
- `data:` lines accumulate and are joined with "\\n"
- `id:` and `retry:` are reported on the event of the same block
- lines starting with `:` are comments
- a blank line dispatches the event
"""

from __future__ import annotations

import codecs
import re
from collections import deque
from collections.abc import AsyncIterator, Iterator

from sse_stream._errors import SSEDecodeError
from sse_stream._types import (
    DEFAULT_EVENT_TYPE,
    SSE_ENCODING,
    EventSink,
    ServerSentEvent,
)

# Optional whitespace and plus sign, then ASCII digits
_RETRY_PATTERN = re.compile(r"\s*\+?([0-9]+)")


def _parse_field(line: str) -> tuple[str, str]:
    """Split a line into (field, value), dropping one space after the colon."""
    field, sep, value = line.partition(":")
    if not sep:
        # A bare field name has an empty value
        return line, ""
    if value.startswith(" "):
        value = value[1:]
    return field, value


def _parse_retry(value: str) -> int | None:
    """
    Return the retry delay in milliseconds, or None if value has none.

    Leading whitespace is skipped and the leading run of digits is used, so
    "1000ms" gives 1000. Negative values are rejected.
    """
    match = _RETRY_PATTERN.match(value)
    if match is None:
        return None
    return int(match.group(1))


class SSEParser:
    """
    Incremental SSE parser.

    Text (or bytes) can be fed in chunks of any size; completed events are
    passed to `on_event` as soon as their terminating blank line arrives.
    A block that is never terminated is never dispatched.

    Example:
        >>> events = []
        >>> parser = SSEParser(events.append)
        >>> parser.feed_text("data: hel")
        >>> parser.feed_text("lo\\n\\n")
        >>> events
        [ServerSentEvent(event='message', data='hello', id=None, retry=None)]
    """

    def __init__(self, on_event: EventSink, *, errors: str = "replace") -> None:
        """
        Args:
            on_event: Called once per completed event, in stream order
            errors: Codec error handler for invalid UTF-8 ("replace" or
                "strict"; any registered handler name is accepted)

        Raises:
            ValueError: If errors is not a registered codec error handler
        """
        try:
            codecs.lookup_error(errors)
        except LookupError as e:
            raise ValueError(f"Unknown decode error handler: {errors!r}") from e

        self._on_event = on_event
        self._errors = errors
        # Use incremental decoder to handle UTF-8 codepoints split across chunks
        self._decoder = codecs.getincrementaldecoder(SSE_ENCODING)(errors)
        self._carry = ""
        self._skip_line = False
        self._current_event_type: str | None = None
        self._current_id: str | None = None
        self._current_retry: int | None = None
        self._data_lines: list[str] = []

    @property
    def pending(self) -> str:
        """Text received after the last complete line."""
        return self._carry

    def feed_text(self, text: str) -> None:
        """
        Feed a chunk of decoded text.

        Args:
            text: Any fragment of the stream, possibly empty or partial
        """
        if self._skip_line:
            # Rest of a line that held undecodable bytes
            _, newline, text = text.partition("\n")
            if not newline:
                return
            self._skip_line = False

        # Normalize after joining with the carry so a "\r" ending the previous
        # chunk pairs with a "\n" starting this one.
        lines = (self._carry + text).replace("\r\n", "\n").split("\n")
        self._carry = lines.pop()

        for line in lines:
            self._process_line(line)

    def feed_bytes(self, chunk: bytes) -> None:
        """
        Feed a chunk of raw UTF-8 bytes.

        Incomplete multi-byte sequences at the end of the chunk are held by
        the decoder until the next call.

        With errors="strict", a line containing invalid bytes is dropped.
        Everything before and after that line, including the rest of the
        chunk, is parsed as usual before the error is raised.

        Raises:
            SSEDecodeError: If errors="strict" and the chunk is not valid UTF-8
        """
        self._feed_decoded(chunk, final=False)

    def finish(self) -> None:
        """
        Signal the end of input.

        Flushes the decoder; bytes left over from an incomplete sequence are
        handled by the error policy. Buffered fields and any partial line are
        not dispatched, since an event without its blank line is incomplete.

        Raises:
            SSEDecodeError: If errors="strict" and the input ended mid-sequence
        """
        self._feed_decoded(b"", final=True)

    def _feed_decoded(self, chunk: bytes, final: bool) -> None:
        first_error: UnicodeDecodeError | None = None

        while True:
            held, _ = self._decoder.getstate()
            try:
                text = self._decoder.decode(chunk, final)
            except UnicodeDecodeError as e:
                self._decoder.reset()
                # Offsets are relative to the held bytes plus this chunk
                data = held + chunk
                self.feed_text(data[: e.start].decode(SSE_ENCODING))
                self._carry = ""
                self._skip_line = True
                if first_error is None:
                    first_error = e
                chunk = data[e.end :]
                continue

            if text:
                self.feed_text(text)
            break

        if first_error is not None:
            raise SSEDecodeError(position=first_error.start) from first_error

    def _process_line(self, line: str) -> None:
        # Empty line signals end of event
        if line == "":
            self._emit_event()
            return

        # Comment
        if line.startswith(":"):
            return

        field, value = _parse_field(line)

        if field == "event":
            self._current_event_type = value
        elif field == "data":
            self._data_lines.append(value)
        elif field == "id":
            self._current_id = value
        elif field == "retry":
            retry = _parse_retry(value)
            if retry is not None:
                self._current_retry = retry
        # Ignore unknown fields

    def _emit_event(self) -> None:
        event = ServerSentEvent(
            event=(
                self._current_event_type
                if self._current_event_type is not None
                else DEFAULT_EVENT_TYPE
            ),
            data="\n".join(self._data_lines),
            id=self._current_id,
            retry=self._current_retry,
        )
        self._reset()
        self._on_event(event)

    def _reset(self) -> None:
        """Reset field state for the next event. The carry is kept."""
        self._current_event_type = None
        self._current_id = None
        self._current_retry = None
        self._data_lines = []


def parse_sse_sync(byte_iterator: Iterator[bytes]) -> Iterator[ServerSentEvent]:
    """
    Parse SSE events from a synchronous byte iterator.

    Args:
        byte_iterator: Iterator yielding bytes

    Yields:
        Parsed SSE events, in stream order
    """
    pending: deque[ServerSentEvent] = deque()
    parser = SSEParser(pending.append)

    for chunk in byte_iterator:
        if chunk:
            parser.feed_bytes(chunk)
            while pending:
                yield pending.popleft()

    parser.finish()
    while pending:
        yield pending.popleft()


async def parse_sse_async(
    byte_iterator: AsyncIterator[bytes],
) -> AsyncIterator[ServerSentEvent]:
    """
    Parse SSE events from an asynchronous byte iterator.

    Args:
        byte_iterator: Async iterator yielding bytes

    Yields:
        Parsed SSE events, in stream order
    """
    pending: deque[ServerSentEvent] = deque()
    parser = SSEParser(pending.append)

    async for chunk in byte_iterator:
        if chunk:
            parser.feed_bytes(chunk)
            while pending:
                yield pending.popleft()

    parser.finish()
    while pending:
        yield pending.popleft()
